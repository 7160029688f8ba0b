"""Static lexicon and pattern tables.

Pure configuration: intent regex patterns, keyword lists, sentiment words,
concept relationship groups and command patterns. Order matters wherever a
table is iterated to break ties, so every table here is an ordered sequence.
"""

from typing import Dict, List, Tuple

# =============================================================================
# INTENT PATTERNS
# =============================================================================

# Declaration order is the classifier's tie-break order.
INTENT_PATTERNS: Dict[str, List[str]] = {
    "ui_creation": [
        r"create|build|make|design|generate.*(?:component|ui|interface|page|form|button|modal|dashboard)",
        r"(?:component|ui|interface|page|form|button|modal|dashboard).*(?:create|build|make|design|generate)",
        r"add.*(?:component|ui|interface|page|form|button|modal|dashboard)",
    ],
    "backend_setup": [
        r"(?:api|backend|server|database|auth|authentication).*(?:setup|create|build|configure)",
        r"setup|create|build|configure.*(?:api|backend|server|database|auth|authentication)",
        r"add.*(?:api|backend|server|database|auth|authentication)",
    ],
    "styling": [
        r"(?:style|css|design|color|theme|layout).*(?:change|update|modify|fix)",
        r"change|update|modify|fix.*(?:style|css|design|color|theme|layout)",
        r"make.*(?:blue|red|green|yellow|purple|orange|black|white|gray)",
    ],
    "data_management": [
        r"(?:data|database|table|record|user|crud).*(?:manage|handle|process|store)",
        r"manage|handle|process|store.*(?:data|database|table|record|user)",
        r"(?:add|create|update|delete|fetch|get).*(?:data|record|user)",
    ],
    "enhancement": [
        r"(?:improve|enhance|optimize|upgrade|better|fix)",
        r"add.*(?:feature|functionality|capability)",
        r"make.*(?:better|faster|more|responsive)",
    ],
    "data_visualization": [
        r"\b(?:visuali[sz]e|plot)\b",
        r"(?:chart|graph|plot|diagram|visuali[sz]ation).*(?:show|display|render|compare|track)",
        r"(?:show|display|render|compare|track).*(?:chart|graph|plot|diagram|visuali[sz]ation)",
    ],
    "translation": [
        r"\b(?:translate|translation|locali[sz]e|locali[sz]ation|i18n)\b",
        r"\b(?:into|to)\s+(?:spanish|french|german|italian|portuguese|japanese|chinese)\b",
    ],
    "test_generation": [
        r"\b(?:write|generate|create|add)\b.*\btests?\b",
        r"\b(?:unit|integration|e2e)\s+tests?\b",
    ],
    "report_generation": [
        r"\b(?:generate|create|write)\b.*\b(?:report|documentation)\b",
        r"\b(?:summari[sz]e|summary)\b",
    ],
    "question": [
        r"^(?:what|how|why|when|where|which|who|can|could|should|would|is|are|does|do)\b",
        r"\b(?:explain|difference between|what is|how do)\b",
    ],
    "greeting": [
        r"^(?:hi|hello|hey|greetings|good (?:morning|afternoon|evening))\b",
    ],
}

INTENT_GROUP_MAP: Dict[str, str] = {
    "ui_creation": "ui_creation",
    "backend_setup": "backend_setup",
    "styling": "styling_request",
    "data_management": "database_operation",
    "enhancement": "feature_request",
    "data_visualization": "data_visualization",
    "translation": "translation",
    "test_generation": "test_generation",
    "report_generation": "report_generation",
    "question": "question",
    "greeting": "greeting",
}

FALLBACK_INTENT = "unknown"

# =============================================================================
# KEYWORDS
# =============================================================================

# Domain keywords: drive confidence density and keyword relevance.
TECH_KEYWORDS: Tuple[str, ...] = (
    "react",
    "nextjs",
    "typescript",
    "javascript",
    "tailwind",
    "css",
    "html",
    "api",
    "database",
    "auth",
    "authentication",
    "component",
    "hook",
    "state",
    "form",
    "button",
    "modal",
    "dashboard",
    "chart",
    "table",
    "card",
    "layout",
)

# Category keyword lists, in EntityCategory priority order.
CATEGORY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "technology": (
        "react",
        "nextjs",
        "typescript",
        "javascript",
        "tailwind",
        "css",
        "html",
        "api",
        "database",
        "auth",
    ),
    "component": (
        "button",
        "form",
        "modal",
        "dashboard",
        "table",
        "card",
        "layout",
    ),
    "visualization": (
        "chart",
        "graph",
        "dashboard",
        "plot",
        "diagram",
        "visualization",
    ),
    "translation": (
        "translate",
        "language",
        "i18n",
        "localization",
        "spanish",
        "french",
        "german",
    ),
    "vision": (
        "image",
        "photo",
        "picture",
        "visual",
        "design",
        "mockup",
        "screenshot",
    ),
    "report": (
        "report",
        "document",
        "summary",
        "analysis",
        "documentation",
    ),
}

# Keywords emitted as entities when contained in a token.
ENTITY_KEYWORDS: Tuple[str, ...] = TECH_KEYWORDS + tuple(
    keyword
    for category in (
        "visualization",
        "translation",
        "vision",
        "report",
    )
    for keyword in CATEGORY_KEYWORDS[category]
    if keyword not in TECH_KEYWORDS
)

# Whole tokens with these endings are UI components in their own right.
UI_SUFFIX_PATTERN = r"(?:button|form|modal|card|table|chart|menu|nav|header|footer)$"

POSITIVE_WORDS: Tuple[str, ...] = (
    "good",
    "great",
    "awesome",
    "excellent",
    "perfect",
    "love",
    "like",
    "amazing",
    "wonderful",
)

NEGATIVE_WORDS: Tuple[str, ...] = (
    "bad",
    "terrible",
    "awful",
    "hate",
    "dislike",
    "broken",
    "wrong",
    "error",
    "problem",
    "issue",
)

FILLER_WORDS_PATTERN = r"\b(?:uh+|um+|er+)\b"

# =============================================================================
# CONCEPTS
# =============================================================================

# Each group is a clique in the undirected concept graph.
CONCEPT_RELATIONSHIPS: Tuple[Tuple[str, ...], ...] = (
    ("frontend", "ui", "component", "react", "interface"),
    ("backend", "api", "server", "database", "logic"),
    ("authentication", "login", "user", "security", "session"),
    ("responsive", "mobile", "desktop", "layout", "design"),
    ("database", "data", "storage", "query", "table"),
    ("form", "input", "validation", "submit", "field"),
    ("dashboard", "chart", "analytics", "data", "visualization"),
    ("navigation", "menu", "routing", "page", "link"),
)

# Regex -> concept tag, evaluated against lowercase raw text.
CONCEPT_PATTERNS: Tuple[Tuple[str, str], ...] = (
    (r"create|build|make|generate", "creation"),
    (r"responsive|mobile|desktop", "responsive_design"),
    (r"user|login|auth", "user_management"),
    (r"data|database|store", "data_management"),
    (r"api|server|backend", "backend_development"),
    (r"ui|interface|component", "frontend_development"),
)

# =============================================================================
# CONVERSATION PATTERNS
# =============================================================================

# pattern name -> verbs searched (substring) in the most recent utterances
CONVERSATION_PATTERNS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("iterative_refinement", ("change", "modify", "update")),
    ("feature_expansion", ("add", "include", "also")),
    ("problem_solving", ("fix", "error", "issue")),
)

# pattern name -> concepts that must all be frequent in long-term memory
LONG_TERM_PATTERNS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("mobile_focus", ("responsive", "mobile")),
    ("full_stack_development", ("database", "api")),
)

# =============================================================================
# COMMAND PATTERNS
# =============================================================================

# (regex, intent, group names, constant parameters, confidence)
COMMAND_PATTERNS: Tuple[Tuple[str, str, Tuple[str, ...], Dict[str, object], float], ...] = (
    (r"create\s+(?:a\s+)?(\w+)\s+(?:page|component|interface)", "ui_creation", ("componentType",), {}, 0.9),
    (r"build\s+(?:a\s+)?(\w+)\s+with\s+(.+)", "ui_creation", ("componentType", "features"), {}, 0.85),
    (r"make\s+(?:a\s+)?responsive\s+(.+)", "ui_creation", ("componentType",), {"responsive": True}, 0.8),
    (r"setup\s+(?:an?\s+)?api\s+(?:for\s+)?(.+)", "backend_setup", ("apiFor",), {}, 0.9),
    (r"create\s+(?:a\s+)?server\s+function\s+(?:for\s+)?(.+)", "backend_setup", ("functionFor",), {}, 0.85),
    (r"add\s+authentication\s+(?:to\s+)?(.+)", "backend_setup", ("authFor",), {}, 0.9),
    (r"create\s+(?:a\s+)?database\s+(?:table\s+)?(?:for\s+)?(.+)", "database_operation", ("tableFor",), {}, 0.9),
    (r"setup\s+(?:a\s+)?schema\s+(?:for\s+)?(.+)", "database_operation", ("schemaFor",), {}, 0.85),
    (r"refactor\s+(?:the\s+)?(.+)", "code_refactor", ("codeToRefactor",), {}, 0.9),
    (r"generate\s+tests\s+(?:for\s+)?(.+)", "test_generation", ("testFor",), {}, 0.9),
    (r"make\s+(?:it\s+)?look\s+(\w+)", "styling_request", ("style",), {}, 0.8),
    (r"change\s+(?:the\s+)?colou?rs?\s+to\s+(\w+)", "styling_request", ("color",), {}, 0.9),
    (r"add\s+(?:a\s+)?(\w+)\s+feature", "feature_request", ("featureType",), {}, 0.9),
    (r"integrate\s+with\s+(\w+)", "feature_request", ("integration",), {}, 0.85),
    (r"translate\s+(?:the\s+)?(.+?)\s+(?:in)?to\s+(\w+)", "translation", ("translateWhat", "language"), {}, 0.85),
    (r"how\s+(?:do\s+i|can\s+i)\s+(.+)", "question", ("question",), {}, 0.8),
    (r"what\s+is\s+(.+)", "question", ("about",), {}, 0.8),
)
