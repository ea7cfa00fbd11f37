from service.service import create_app

__all__ = ["create_app"]
