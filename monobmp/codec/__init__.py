from .layout import Layout, compute_layout, row_stride

__all__ = ["Layout", "compute_layout", "row_stride"]
