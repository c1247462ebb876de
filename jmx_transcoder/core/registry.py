import xml.etree.ElementTree as ET
from typing import Any, Dict, Iterable, List, Optional

from .codec import Codec, discriminator
from .errors import UnsupportedElementError
from .model import JMXComponent, check_editable


class CodecRegistry:
    """Maps an element kind (its testclass) to the codec that reads and writes it.

    Decoding an unregistered kind yields None: the parser drops such an element
    and its whole subtree, so it will not survive a round trip. Encoding an
    unregistered kind is a programming error and raises.
    """

    def __init__(self, codecs: Iterable[Codec] = ()):
        self._codecs: Dict[str, Codec] = {}
        for codec in codecs:
            self.register(codec)

    def register(self, codec: Codec) -> None:
        self._codecs[codec.type] = codec

    def lookup(self, element_type: str) -> Optional[Codec]:
        return self._codecs.get(element_type)

    def __contains__(self, element_type: str) -> bool:
        return element_type in self._codecs

    def types(self) -> List[str]:
        return list(self._codecs)

    def decode(self, node: ET.Element) -> Optional[JMXComponent]:
        codec = self.lookup(discriminator(node))
        if codec is None:
            return None
        return codec.decode(node)

    def encode(self, element: JMXComponent) -> ET.Element:
        codec = self.lookup(element.type)
        if codec is None:
            raise UnsupportedElementError(element.type)
        return codec.encode(element)

    def create(self, element_type: str, **fields: Any) -> JMXComponent:
        """Build a brand-new element of a kind from its default values.

        Raises ValueError when ``fields`` names id, type or children.
        """
        codec = self.lookup(element_type)
        if codec is None:
            raise UnsupportedElementError(element_type)
        check_editable(fields)
        return codec.model(type=element_type, **fields)

    def catalog(self) -> List[Dict[str, Any]]:
        """Describe every kind for an "add element" palette"""
        entries = []
        for element_type, codec in self._codecs.items():
            defaults = codec.model(type=element_type).model_dump(exclude={"id", "children"})
            entries.append({
                "type": element_type,
                "category": codec.category,
                "name": defaults["name"],
                "defaults": defaults,
            })
        return entries


_default_registry: Optional[CodecRegistry] = None


def default_registry() -> CodecRegistry:
    """The registry holding every built-in element kind"""
    global _default_registry
    if _default_registry is None:
        from ..elements.catalog import BUILTIN_CODECS

        _default_registry = CodecRegistry(BUILTIN_CODECS)
    return _default_registry
