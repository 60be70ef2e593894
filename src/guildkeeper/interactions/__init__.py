from .collector import InteractionCollector, component_check, custom_id_of, modal_check

__all__ = ["InteractionCollector", "component_check", "custom_id_of", "modal_check"]
