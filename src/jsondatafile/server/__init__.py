from jsondatafile.server.api import app

__all__ = ["app"]
