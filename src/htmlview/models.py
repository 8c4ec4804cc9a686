"""
Pydantic-модели для дерева разобранной разметки и дерева отображения.

ParsedNode выдаёт парсер разметки; DisplayNode компилятор передаёт
рендереру Qt.
"""

from enum import Enum
from typing import Optional, List, Dict, Any, Callable, Union
from pydantic import BaseModel, Field


# ===== PARSED TREE =====

class NodeKind(str, Enum):
    """Вид узла разобранной разметки."""
    TAG = "tag"
    TEXT = "text"
    COMMENT = "comment"


class ParsedNode(BaseModel):
    """Узел дерева разобранной разметки."""
    kind: NodeKind
    name: Optional[str] = None  # имя тега в нижнем регистре
    attributes: Dict[str, str] = Field(default_factory=dict)
    children: List["ParsedNode"] = Field(default_factory=list)
    data: Optional[str] = None  # текст или содержимое комментария

    @classmethod
    def tag(
        cls,
        name: str,
        attributes: Optional[Dict[str, str]] = None,
        children: Optional[List["ParsedNode"]] = None
    ) -> "ParsedNode":
        return cls(
            kind=NodeKind.TAG,
            name=name,
            attributes=attributes or {},
            children=children or []
        )

    @classmethod
    def text(cls, data: str) -> "ParsedNode":
        return cls(kind=NodeKind.TEXT, data=data)

    @property
    def is_tag(self) -> bool:
        return self.kind == NodeKind.TAG

    @property
    def is_text(self) -> bool:
        return self.kind == NodeKind.TEXT


# ===== STYLES =====

class StyleKey(str, Enum):
    """Известные варианты стиля; неизвестные теги получают DEFAULT."""
    DEFAULT = "default"
    P = "p"
    BLOCKQUOTE = "blockquote"
    PRE = "pre"
    CODE = "code"
    A = "a"
    I = "i"  # noqa: E741
    B = "b"
    STRONG = "strong"
    EM = "em"
    U = "u"
    S = "s"

    @classmethod
    def from_tag(cls, name: Optional[str]) -> "StyleKey":
        """Ключ стиля для имени тега (None или неизвестный -> DEFAULT)."""
        if not name:
            return cls.DEFAULT
        try:
            return cls(name)
        except ValueError:
            return cls.DEFAULT


class DynamicColor(BaseModel):
    """Цвет, зависящий от светлой или тёмной темы."""
    light: str
    dark: str

    def resolve(self, dark: bool = False) -> str:
        return self.dark if dark else self.light


class NodeStyle(BaseModel):
    """Описание внешнего вида для одного StyleKey."""
    font_size: Optional[int] = None
    font_family: Optional[str] = None
    italic: bool = False
    bold: bool = False
    underline: bool = False
    strike: bool = False
    color: Optional[str] = None
    background: Optional[DynamicColor] = None
    margin_bottom: Optional[int] = None
    padding: Optional[int] = None
    opacity: Optional[float] = None
    border_radius: Optional[int] = None
    white_space: Optional[str] = None
    block: bool = Field(default=False, description="Рисуется блоком (div), а не строчным фрагментом")


# ===== DISPLAY TREE =====

class ContainerKind(str, Enum):
    """Нативный примитив, в который превращается узел."""
    TEXT = "text"
    SCROLL = "scroll"


class InteractionHandlers(BaseModel):
    """Обработчики жестов по ссылке, привязанные к её адресу."""
    href: str
    on_activate: Callable[[], Any]
    on_long_activate: Callable[[], Any]


class DisplayNode(BaseModel):
    """Типизированный узел со стилем для рендерера."""
    key: str  # уникален только в пределах одной компиляции
    style_key: StyleKey = StyleKey.DEFAULT
    container: ContainerKind = ContainerKind.TEXT
    content: Union[str, List["DisplayNode"]]
    handlers: Optional[InteractionHandlers] = None

    @property
    def is_leaf(self) -> bool:
        return isinstance(self.content, str)

    def iter_nodes(self):
        """Обход поддерева в глубину, начиная с самого узла."""
        yield self
        if not self.is_leaf:
            for child in self.content:
                yield from child.iter_nodes()

    def to_dict(self) -> Dict[str, Any]:
        """Представление для JSON без вызываемых объектов."""
        data: Dict[str, Any] = {
            "key": self.key,
            "style": self.style_key.value,
            "container": self.container.value,
        }
        if self.handlers is not None:
            data["href"] = self.handlers.href
        if self.is_leaf:
            data["content"] = self.content
        else:
            data["content"] = [child.to_dict() for child in self.content]
        return data


# ===== PIPELINE =====

class CompilationTicket(BaseModel):
    """Метка одного запроса компиляции для отбрасывания устаревших результатов."""
    serial: int
    html: str
    linkify: bool


# ===== LOCAL CONFIG =====

class ViewerConfig(BaseModel):
    """Конфигурация просмотрщика."""
    linkify: bool = Field(default=False, description="Оборачивать голые URL в тексте в ссылки")
    dark_mode: bool = Field(default=False, description="Цвета тёмной темы")
    pre_max_height_ratio: float = Field(
        default=0.5,
        gt=0.0,
        le=1.0,
        description="Максимальная высота блока кода как доля высоты экрана"
    )


ParsedNode.model_rebuild()
DisplayNode.model_rebuild()
