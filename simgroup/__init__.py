"""Group visually similar images, including those in zip archives, by perceptual hash."""

__version__ = "0.1.0"
__all__ = ["__version__"]