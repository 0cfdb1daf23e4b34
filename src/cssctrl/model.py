"""Style model: StyleDefinition and the blocks the extractor produces."""

from __future__ import annotations

from dataclasses import dataclass, field

PropertyMap = dict[str, str]

SCOPE_NONE = "none"


def final_name(scope: str, name: str) -> str:
    """Qualify *name* with *scope*; scope ``none`` leaves it unchanged."""
    if scope == SCOPE_NONE:
        return name
    return f"{scope}_{name}"


@dataclass
class ConditionalBlock:
    """A ``screen(...)`` or ``container(...)`` entry: query plus properties."""

    query: str  # e.g. "(min-width:768px)"
    props: PropertyMap = field(default_factory=dict)


@dataclass
class PluginState:
    """Properties applied when a plugin marks the element with a state class."""

    selector: str  # registry fragment, e.g. 'listboxPlugin-selected[aria-selected="true"]'
    props: PropertyMap = field(default_factory=dict)


@dataclass
class PluginContainer:
    """Properties applied when the element sits inside a plugin container."""

    container_name: str  # e.g. "drawerPluginContainer"
    props: PropertyMap = field(default_factory=dict)


@dataclass
class StyleDefinition:
    """Compiled result of one selector context.

    The ``var_*`` buckets hold runtime-variable defaults that are still pending:
    the dispatcher fills them and the variable transformer drains them into
    ``root_vars``.  They must all be empty before the CSS builder runs.
    """

    base: PropertyMap = field(default_factory=dict)
    states: dict[str, PropertyMap] = field(default_factory=dict)
    screens: list[ConditionalBlock] = field(default_factory=list)
    containers: list[ConditionalBlock] = field(default_factory=list)
    pseudos: dict[str, PropertyMap] = field(default_factory=dict)
    plugin_states: dict[str, PluginState] = field(default_factory=dict)
    plugin_containers: list[PluginContainer] = field(default_factory=list)
    nested_queries: list[NestedQueryNode] = field(default_factory=list)
    root_vars: PropertyMap = field(default_factory=dict)
    local_vars: PropertyMap = field(default_factory=dict)
    used_local_vars: set[str] = field(default_factory=set)
    has_runtime_var: bool = False
    var_base: PropertyMap = field(default_factory=dict)
    var_states: dict[str, PropertyMap] = field(default_factory=dict)
    var_pseudos: dict[str, PropertyMap] = field(default_factory=dict)
    var_containers: dict[str, PropertyMap] = field(default_factory=dict)

    @property
    def has_pending_vars(self) -> bool:
        return bool(
            self.var_base
            or any(self.var_states.values())
            or any(self.var_pseudos.values())
            or any(self.var_containers.values())
        )

    def plugin_container(self, container_name: str) -> PluginContainer:
        """Return the entry for *container_name*, creating it on first use."""
        for entry in self.plugin_containers:
            if entry.container_name == container_name:
                return entry
        entry = PluginContainer(container_name=container_name)
        self.plugin_containers.append(entry)
        return entry

    def property_maps(self) -> list[PropertyMap]:
        """Every property map owned directly by this definition."""
        maps = [self.base]
        maps.extend(self.states.values())
        maps.extend(state.props for state in self.plugin_states.values())
        maps.extend(block.props for block in self.screens)
        maps.extend(block.props for block in self.containers)
        maps.extend(entry.props for entry in self.plugin_containers)
        maps.extend(self.pseudos.values())
        return maps

    def merge(self, other: StyleDefinition) -> None:
        """Merge a fragment into this definition.

        Values are copied so the fragment can be merged again elsewhere.
        """
        self.base.update(other.base)
        for name, props in other.states.items():
            self.states.setdefault(name, {}).update(props)
        for block in other.screens:
            self.screens.append(ConditionalBlock(block.query, dict(block.props)))
        for block in other.containers:
            self.containers.append(ConditionalBlock(block.query, dict(block.props)))
        for name, props in other.pseudos.items():
            self.pseudos.setdefault(name, {}).update(props)
        for name, state in other.plugin_states.items():
            target = self.plugin_states.setdefault(name, PluginState(state.selector))
            target.props.update(state.props)
        for entry in other.plugin_containers:
            self.plugin_container(entry.container_name).props.update(entry.props)
        self.used_local_vars |= other.used_local_vars


@dataclass
class NestedQueryNode:
    """One ``@query <selector> { ... }`` block and its children."""

    selector: str
    style: StyleDefinition = field(default_factory=StyleDefinition)
    children: list[NestedQueryNode] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ClassBlock:
    """A raw top-level ``.name { body }`` block."""

    name: str
    body: str


@dataclass(frozen=True)
class ConstBlock:
    """A raw ``@const name { ... }`` block split into logical statements."""

    name: str
    statements: tuple[str, ...]


@dataclass(frozen=True)
class ConstFragment:
    """A named, reusable ``@const`` fragment."""

    name: str
    style: StyleDefinition


@dataclass(frozen=True)
class KeyframeBlock:
    """A raw ``@keyframe name { body }`` block, parsed later."""

    name: str
    body: str


@dataclass(frozen=True)
class Directive:
    """A top-level ``@name value`` line such as ``@scope app``."""

    name: str
    value: str


@dataclass
class KeyframeStep:
    """One labelled step (``from``, ``to`` or ``NN%``) of a keyframe."""

    label: str
    props: PropertyMap = field(default_factory=dict)


@dataclass
class KeyframeDefinition:
    """A compiled keyframe with its scope-qualified name."""

    name: str
    final_name: str
    steps: list[KeyframeStep] = field(default_factory=list)
    root_vars: PropertyMap = field(default_factory=dict)


@dataclass
class ExtractedBlocks:
    """Everything the block extractor pulled out of one file."""

    consts: list[ConstBlock] = field(default_factory=list)
    keyframes: list[KeyframeBlock] = field(default_factory=list)
    directives: list[Directive] = field(default_factory=list)
    classes: list[ClassBlock] = field(default_factory=list)
