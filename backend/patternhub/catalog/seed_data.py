# backend/patternhub/catalog/seed_data.py
"""
Pattern Catalog - Bundled design patterns and architectures

Used to seed an empty database and as the default collection for the
in-memory registry. Records are listed in catalog (source) order, which is
also the "popularity" order of the filter engine.
"""

import json
from pathlib import Path
from typing import Dict, List, Tuple

from patternhub.catalog.records import Architecture, PatternCategory, PatternRecord
from patternhub.catalog.registry import PatternRegistry


# ============================================================
# CREATIONAL PATTERNS
# ============================================================

SINGLETON_PATTERN = PatternRecord(
    id=1,
    slug="singleton",
    name="Singleton",
    description="Ensure a class has only one instance and provide a global point of access to it.",
    category=PatternCategory.CREATIONAL.value,
    difficulty=1,
    icon="circle-dot",
    color="from-blue-500 to-blue-600",
    tags=("instance", "global", "shared-state"),
    architectures=frozenset({"mvc", "layered"}),
    languages=frozenset({"javascript", "typescript", "python", "java", "php"}),
    frameworks=frozenset({"spring", "laravel", "angular"}),
    content=(
        "The Singleton restricts instantiation of a class to a single object. "
        "It is useful for shared resources such as configuration or connection pools, "
        "but hides dependencies and makes testing harder when overused."
    ),
    examples={
        "python": (
            "class Config:\n"
            "    _instance = None\n\n"
            "    def __new__(cls):\n"
            "        if cls._instance is None:\n"
            "            cls._instance = super().__new__(cls)\n"
            "        return cls._instance\n"
        ),
        "javascript": (
            "class Config {\n"
            "  static #instance;\n"
            "  static get() {\n"
            "    return (Config.#instance ??= new Config());\n"
            "  }\n"
            "}\n"
        ),
    },
    related_patterns=("factory-method", "facade"),
)


FACTORY_METHOD_PATTERN = PatternRecord(
    id=2,
    slug="factory-method",
    name="Factory Method",
    description="Define an interface for creating an object, letting subclasses decide which class to instantiate.",
    category=PatternCategory.CREATIONAL.value,
    difficulty=2,
    icon="factory",
    color="from-blue-500 to-indigo-600",
    tags=("creation", "polymorphism", "decoupling"),
    architectures=frozenset({"layered", "hexagonal"}),
    languages=frozenset({"java", "csharp", "typescript", "python"}),
    frameworks=frozenset({"spring", "dotnet"}),
    content=(
        "Factory Method moves object construction into an overridable method so "
        "client code depends on an abstraction rather than a concrete class."
    ),
    examples={
        "python": (
            "class Dialog:\n"
            "    def create_button(self):\n"
            "        raise NotImplementedError\n\n"
            "class WebDialog(Dialog):\n"
            "    def create_button(self):\n"
            "        return HtmlButton()\n"
        ),
    },
    related_patterns=("builder", "singleton"),
)


BUILDER_PATTERN = PatternRecord(
    id=3,
    slug="builder",
    name="Builder",
    description="Separate the construction of a complex object from its representation.",
    category=PatternCategory.CREATIONAL.value,
    difficulty=2,
    icon="hammer",
    color="from-sky-500 to-blue-600",
    tags=("construction", "fluent-interface", "immutability"),
    architectures=frozenset({"layered"}),
    languages=frozenset({"java", "csharp", "typescript"}),
    frameworks=frozenset({"spring", "dotnet"}),
    content=(
        "Builder assembles an object step by step, which keeps constructors small "
        "and allows several representations from the same construction process."
    ),
    examples={
        "typescript": (
            "const query = new QueryBuilder()\n"
            "  .select('name')\n"
            "  .from('patterns')\n"
            "  .where('difficulty', 1)\n"
            "  .build();\n"
        ),
    },
    related_patterns=("factory-method",),
)


# ============================================================
# STRUCTURAL PATTERNS
# ============================================================

ADAPTER_PATTERN = PatternRecord(
    id=4,
    slug="adapter",
    name="Adapter",
    description="Convert the interface of a class into another interface clients expect.",
    category=PatternCategory.STRUCTURAL.value,
    difficulty=1,
    icon="plug",
    color="from-green-500 to-emerald-600",
    tags=("wrapper", "compatibility", "integration"),
    architectures=frozenset({"hexagonal", "microservices"}),
    languages=frozenset({"javascript", "typescript", "python", "java"}),
    frameworks=frozenset({"express", "django"}),
    content=(
        "Adapter wraps an incompatible object so it satisfies the interface the "
        "client already uses, typical when integrating third-party APIs."
    ),
    examples={
        "python": (
            "class PaymentAdapter:\n"
            "    def __init__(self, legacy):\n"
            "        self.legacy = legacy\n\n"
            "    def pay(self, amount):\n"
            "        return self.legacy.make_payment(cents=int(amount * 100))\n"
        ),
    },
    related_patterns=("facade", "decorator"),
)


DECORATOR_PATTERN = PatternRecord(
    id=5,
    slug="decorator",
    name="Decorator",
    description="Attach additional responsibilities to an object dynamically.",
    category=PatternCategory.STRUCTURAL.value,
    difficulty=2,
    icon="layers",
    color="from-emerald-500 to-teal-600",
    tags=("wrapper", "composition", "extension"),
    architectures=frozenset({"layered"}),
    languages=frozenset({"python", "typescript", "java"}),
    frameworks=frozenset({"angular", "django"}),
    content=(
        "Decorator wraps an object with another object of the same interface, "
        "adding behavior before or after delegating the call."
    ),
    examples={
        "python": (
            "def logged(func):\n"
            "    def wrapper(*args, **kwargs):\n"
            "        print(f'calling {func.__name__}')\n"
            "        return func(*args, **kwargs)\n"
            "    return wrapper\n"
        ),
    },
    related_patterns=("adapter", "strategy"),
)


FACADE_PATTERN = PatternRecord(
    id=6,
    slug="facade",
    name="Facade",
    description="Provide a unified, simplified interface to a set of interfaces in a subsystem.",
    category=PatternCategory.STRUCTURAL.value,
    difficulty=1,
    icon="building",
    color="from-lime-500 to-green-600",
    tags=("simplification", "subsystem", "api"),
    architectures=frozenset({"layered", "microservices"}),
    languages=frozenset({"javascript", "python", "php", "csharp"}),
    frameworks=frozenset({"laravel", "express", "dotnet"}),
    content=(
        "Facade hides a complex subsystem behind a small entry point, reducing "
        "coupling between clients and the subsystem internals."
    ),
    examples={
        "php": (
            "class OrderFacade {\n"
            "    public function place(array $cart): Order {\n"
            "        $this->inventory->reserve($cart);\n"
            "        return $this->orders->create($cart);\n"
            "    }\n"
            "}\n"
        ),
    },
    related_patterns=("adapter", "singleton"),
)


# ============================================================
# BEHAVIORAL PATTERNS
# ============================================================

OBSERVER_PATTERN = PatternRecord(
    id=7,
    slug="observer",
    name="Observer",
    description="Define a one-to-many dependency so that when one object changes state, its dependents are notified.",
    category=PatternCategory.BEHAVIORAL.value,
    difficulty=2,
    icon="eye",
    color="from-purple-500 to-violet-600",
    tags=("notification", "events", "pub-sub"),
    architectures=frozenset({"event-driven", "mvc"}),
    languages=frozenset({"javascript", "typescript", "java", "csharp"}),
    frameworks=frozenset({"react", "angular", "express"}),
    content=(
        "Observer lets subjects broadcast changes to registered listeners without "
        "knowing their concrete types. It underpins most event systems."
    ),
    examples={
        "javascript": (
            "class Subject {\n"
            "  #listeners = new Set();\n"
            "  subscribe(fn) { this.#listeners.add(fn); }\n"
            "  notify(data) { this.#listeners.forEach((fn) => fn(data)); }\n"
            "}\n"
        ),
    },
    related_patterns=("mediator", "command"),
)


STRATEGY_PATTERN = PatternRecord(
    id=8,
    slug="strategy",
    name="Strategy",
    description="Define a family of algorithms, encapsulate each one, and make them interchangeable.",
    category=PatternCategory.BEHAVIORAL.value,
    difficulty=1,
    icon="git-branch",
    color="from-fuchsia-500 to-purple-600",
    tags=("algorithm", "polymorphism", "composition"),
    architectures=frozenset({"layered", "hexagonal"}),
    languages=frozenset({"python", "java", "typescript", "php"}),
    frameworks=frozenset({"spring", "laravel"}),
    content=(
        "Strategy extracts interchangeable algorithms behind a common interface so "
        "the caller can swap them at runtime instead of branching."
    ),
    examples={
        "python": (
            "SHIPPING = {\n"
            "    'ground': lambda w: 5 + w * 0.5,\n"
            "    'air': lambda w: 15 + w * 1.2,\n"
            "}\n"
            "cost = SHIPPING[method](weight)\n"
        ),
    },
    related_patterns=("decorator", "command"),
)


COMMAND_PATTERN = PatternRecord(
    id=9,
    slug="command",
    name="Command",
    description="Encapsulate a request as an object, allowing queuing, logging and undo.",
    category=PatternCategory.BEHAVIORAL.value,
    difficulty=3,
    icon="terminal",
    color="from-violet-500 to-indigo-600",
    tags=("request", "undo", "queue"),
    architectures=frozenset({"event-driven", "cqrs"}),
    languages=frozenset({"java", "csharp", "typescript"}),
    frameworks=frozenset({"dotnet", "spring"}),
    content=(
        "Command turns an action into a standalone object carrying everything "
        "needed to execute it later, enabling undo stacks and job queues."
    ),
    examples={
        "typescript": (
            "interface Command { execute(): void; undo(): void; }\n"
        ),
    },
    related_patterns=("observer", "strategy"),
)


# ============================================================
# ARCHITECTURAL PATTERNS
# ============================================================

MVC_PATTERN = PatternRecord(
    id=10,
    slug="mvc",
    name="Model-View-Controller",
    description="Separate an application into model, view and controller components.",
    category=PatternCategory.ARCHITECTURAL.value,
    difficulty=2,
    icon="layout",
    color="from-orange-500 to-red-600",
    tags=("separation-of-concerns", "ui", "web"),
    architectures=frozenset({"mvc", "layered"}),
    languages=frozenset({"php", "python", "java", "csharp", "javascript"}),
    frameworks=frozenset({"laravel", "django", "spring", "dotnet", "express"}),
    content=(
        "MVC splits domain state (model), presentation (view) and input handling "
        "(controller), the backbone of most server-side web frameworks."
    ),
    examples={},
    related_patterns=("observer", "repository"),
)


REPOSITORY_PATTERN = PatternRecord(
    id=11,
    slug="repository",
    name="Repository",
    description="Mediate between the domain and data mapping layers using a collection-like interface.",
    category=PatternCategory.ARCHITECTURAL.value,
    difficulty=2,
    icon="database",
    color="from-amber-500 to-orange-600",
    tags=("persistence", "data-access", "ddd"),
    architectures=frozenset({"layered", "hexagonal", "microservices"}),
    languages=frozenset({"csharp", "java", "python", "typescript"}),
    frameworks=frozenset({"dotnet", "spring", "django"}),
    content=(
        "Repository gives the domain a collection-like API for aggregates while "
        "hiding queries and the storage technology behind it."
    ),
    examples={
        "python": (
            "class PatternRepository:\n"
            "    def __init__(self, session):\n"
            "        self.session = session\n\n"
            "    def by_slug(self, slug):\n"
            "        return self.session.query(Pattern).filter_by(slug=slug).first()\n"
        ),
    },
    related_patterns=("mvc", "cqrs"),
)


CQRS_PATTERN = PatternRecord(
    id=12,
    slug="cqrs",
    name="CQRS",
    description="Separate read and write models so each can be optimized and scaled independently.",
    category=PatternCategory.ARCHITECTURAL.value,
    difficulty=3,
    icon="split",
    color="from-red-500 to-rose-600",
    tags=("read-model", "write-model", "event-sourcing"),
    architectures=frozenset({"cqrs", "event-driven", "microservices"}),
    languages=frozenset({"csharp", "java", "typescript"}),
    frameworks=frozenset({"dotnet", "spring"}),
    content=(
        "Command Query Responsibility Segregation uses distinct models for "
        "updates and reads, often paired with event sourcing."
    ),
    examples={},
    related_patterns=("command", "repository"),
)


# ============================================================
# ARCHITECTURES
# ============================================================

ARCHITECTURE_CATALOG = [
    Architecture(id=1, slug="mvc", name="MVC", icon="layout", color="from-orange-500 to-red-600",
                 description="Model-View-Controller web application structure."),
    Architecture(id=2, slug="layered", name="Layered Architecture", icon="layers", color="from-slate-500 to-gray-600",
                 description="Presentation, business and data layers stacked with downward dependencies."),
    Architecture(id=3, slug="microservices", name="Microservices", icon="boxes", color="from-cyan-500 to-blue-600",
                 description="Independently deployable services organized around business capabilities."),
    Architecture(id=4, slug="event-driven", name="Event-Driven", icon="zap", color="from-yellow-500 to-amber-600",
                 description="Components communicate through published events and subscribers."),
    Architecture(id=5, slug="hexagonal", name="Hexagonal (Ports & Adapters)", icon="hexagon", color="from-teal-500 to-green-600",
                 description="Domain core isolated behind ports with pluggable adapters."),
    Architecture(id=6, slug="cqrs", name="CQRS", icon="split", color="from-red-500 to-rose-600",
                 description="Separate command and query sides of the application."),
]


# ============================================================
# CATALOG AGGREGATION
# ============================================================

PATTERN_CATALOG = [
    # Creational
    SINGLETON_PATTERN,
    FACTORY_METHOD_PATTERN,
    BUILDER_PATTERN,
    # Structural
    ADAPTER_PATTERN,
    DECORATOR_PATTERN,
    FACADE_PATTERN,
    # Behavioral
    OBSERVER_PATTERN,
    STRATEGY_PATTERN,
    COMMAND_PATTERN,
    # Architectural
    MVC_PATTERN,
    REPOSITORY_PATTERN,
    CQRS_PATTERN,
]


def count_patterns_by_architecture(patterns: List[PatternRecord]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for pattern in patterns:
        for slug in pattern.architectures:
            counts[slug] = counts.get(slug, 0) + 1
    return counts


def register_all_patterns(registry: PatternRegistry) -> None:
    """Register all patterns from the bundled catalog"""
    for pattern in PATTERN_CATALOG:
        registry.register(pattern)


def load_catalog_file(path) -> Tuple[List[PatternRecord], List[Architecture]]:
    """
    Load an exported catalog: {"patterns": [...], "architectures": [...]}.

    Entries missing an id fall back to their slug, matching how exports
    keyed documents.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))

    patterns = []
    for entry in data.get("patterns", []):
        entry = dict(entry)
        entry.setdefault("id", entry.get("slug"))
        patterns.append(PatternRecord.from_dict(entry))

    architectures = []
    for entry in data.get("architectures", []):
        entry = dict(entry)
        entry.setdefault("id", entry.get("slug"))
        architectures.append(Architecture.from_dict(entry))

    return patterns, architectures
