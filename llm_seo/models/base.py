from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for records that travel as JSON with camelCase keys.

    Python code reads and writes snake_case attributes; caches, templates and
    datasets on disk use the camelCase aliases (``seoTitle``, ``featureList``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
