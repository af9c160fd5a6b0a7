from . import roster, class_record

__all__ = ["roster", "class_record"]
