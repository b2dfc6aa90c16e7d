from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("singlewave")
except PackageNotFoundError:
    __version__ = "0+local"
