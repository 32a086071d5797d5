from .media import MediaDownloader

__all__ = ["MediaDownloader"]
