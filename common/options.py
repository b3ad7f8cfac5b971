"""
Option boundary helper.

Services accept either a ready option model or a plain mapping (as received
from a request payload). Mappings are validated here, once, so that the rest
of the engine only ever sees fully-defaulted option models.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .exceptions import InputError

ModelT = TypeVar("ModelT", bound=BaseModel)


def build_options(
    model_cls: type[ModelT],
    options: Optional[Union[ModelT, Mapping[str, Any]]] = None,
) -> ModelT:
    """
    Return ``options`` as a validated ``model_cls`` instance.

    Raises:
        InputError: If the mapping does not validate
    """
    if options is None:
        return model_cls()
    if isinstance(options, model_cls):
        return options
    try:
        return model_cls.model_validate(dict(options))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'options'}: {err['msg']}"
            for err in exc.errors()
        )
        raise InputError(f"Invalid {model_cls.__name__}", details=problems) from exc
