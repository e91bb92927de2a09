"""pkgorder — compute installation orders from package dependency manifests."""

__version__ = "0.1.0"
