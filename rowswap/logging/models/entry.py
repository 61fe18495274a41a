from typing import Any, Dict

import msgspec

from .log_level import LogLevel


class Entry(msgspec.Struct, kw_only=True):
    """
    Base log entry. Subclasses add the structured fields of one concern
    (a UDP handler, a swap target) and pin a default level.
    """

    message: str = ""
    tags: frozenset[str] = msgspec.field(
        default_factory=frozenset,
    )
    level: LogLevel

    def to_dict(self) -> Dict[str, Any]:
        return {
            field: getattr(self, field) for field in self.__struct_fields__
        }

    def to_template(
        self,
        template: str,
        context: Dict[str, Any] | None = None,
    ) -> str:
        kwargs = self.to_dict()
        kwargs["level"] = self.level.value
        kwargs["tags"] = ",".join(sorted(self.tags))

        if context:
            kwargs.update(context)

        return template.format(**kwargs)
