from typing import Any, Mapping


class Renderer:
    """Strategy interface: (template name, data) -> bytes."""
    def render(self, name: str, data: Mapping[str, Any]) -> bytes:
        raise NotImplementedError
