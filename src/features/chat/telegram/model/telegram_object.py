from pydantic import BaseModel, ConfigDict


class TelegramObject(BaseModel):
    """
    Base for all inbound Bot API objects.

    Instances are immutable once parsed. Fields the model does not know about are
    ignored so that protocol additions never break parsing, and fields can be
    populated either by their wire name (``from``) or their Python name (``from_user``).
    """
    model_config = ConfigDict(frozen = True, extra = "ignore", populate_by_name = True)
