from .real_debrid import RealDebridResolver

__all__ = ["RealDebridResolver"]
