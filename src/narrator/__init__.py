from importlib.metadata import version, PackageNotFoundError


try:
    __version__ = version('narrator-scenario-runner')
except PackageNotFoundError:
    __version__ = 'unknown'
