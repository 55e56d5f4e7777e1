import datetime

import pydantic as p


class BaseModel(p.BaseModel):
    # settings models are dumped into dictConfig, which needs "()" and "class"
    model_config = p.ConfigDict(serialize_by_alias=True)


class ValueModel(BaseModel):
    """Immutable, hashable value carried between engine stages."""

    model_config = p.ConfigDict(frozen=True)


class WithCtime(BaseModel):
    create_time: datetime.datetime


class WithTimestamps(WithCtime):
    update_time: datetime.datetime
