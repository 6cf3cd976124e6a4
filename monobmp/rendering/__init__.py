from .image import ConversionSettings, load_image, raster_from_image, raster_to_image

__all__ = ["ConversionSettings", "load_image", "raster_from_image", "raster_to_image"]
