from padel.config.settings import settings

__all__ = ["settings"]
