import os
from typing import Callable, Dict, Mapping, TypeVar

from dotenv import dotenv_values
from pydantic import BaseModel

from .env import Env, PrimaryType

T = TypeVar("T", bound=BaseModel)


def _convert_values(
    source: Mapping[str, str | None],
    envars: Dict[str, Callable[[str], PrimaryType]],
) -> Dict[str, PrimaryType]:
    values: Dict[str, PrimaryType] = {}

    for envar_name, envar_type in envars.items():
        envar_value = source.get(envar_name)
        if not envar_value:
            continue

        try:
            values[envar_name] = envar_type(envar_value)

        except ValueError as conversion_error:
            raise ValueError(
                f"Err. - invalid value for {envar_name}: {envar_value!r}"
            ) from conversion_error

    return values


def load_env(
    default: type[Env] = Env,
    env_file: str | None = None,
    override: T | None = None,
) -> T:
    """
    Build settings from, in increasing precedence, the process environment,
    a dotenv file (``.env`` in the working directory unless given) and the
    fields explicitly set on ``override``. Unknown keys are ignored.
    """
    envars = default.types_map()

    if env_file is None:
        env_file = ".env"

    values = _convert_values(os.environ, envars)

    if os.path.exists(env_file):
        values.update(
            _convert_values(dotenv_values(dotenv_path=env_file), envars)
        )

    if override:
        values.update(override.model_dump(exclude_unset=True))

        return type(override)(**values)

    return default(**values)
