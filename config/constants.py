"""Constants used across the application."""

from enum import Enum


class CapabilityTier(str, Enum):
    FRONTIER = "Frontier"
    PRODUCTION = "Production"
    SPECIALIZED = "Specialized"
    EXPERIMENTAL = "Experimental"
    STANDARD = "Standard"
    LIGHTWEIGHT = "Lightweight"


class ContextBucket(str, Enum):
    ALL = "all"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    XLARGE = "xlarge"


class SortKey(str, Enum):
    DISPLAY_NAME = "displayName"
    VENDOR_NAME = "vendorName"
    CATEGORY_NAME = "categoryName"
    PARAMETERS = "parametersB"
    CONTEXT_WINDOW = "contextWindow"
    TOKEN_LIMIT = "tokenLimit"
    INPUT_PRICE = "inputPrice"
    OUTPUT_PRICE = "outputPrice"
    SAMPLE_PRICE = "samplePrice"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# All prices are dollars per one million tokens
TOKENS_PER_PRICE_UNIT = 1_000_000

# Upstream listings quote prices per token
UPSTREAM_PRICE_MULTIPLIER = 1_000_000

MAX_TOKEN_MULTIPLIER = 1000

# Vendors kept when normalizing raw upstream listings
ALLOWED_VENDORS = frozenset({
    "anthropic",      # Claude
    "google",         # Gemini / Gemma
    "meta",           # Llama
    "deepseek",
    "inference-net",  # low-cost host
})

# Searched in display names when the identifier carries no vendor prefix
KNOWN_VENDOR_KEYWORDS = [
    "openai", "anthropic", "google", "meta", "microsoft",
    "cohere", "deepseek", "mistral", "qwen",
]

UNKNOWN_VENDOR = "unknown"

# Category keyword groups, highest priority first
CATEGORY_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("Code Generation", ("code", "coding", "programmer", "developer", "github", "repository", "programming")),
    ("Multimodal", ("vision", "image", "visual", "multimodal", "picture", "photo", "camera", "ocr")),
    ("Reasoning", ("reasoning", "thinking", "logic", "math", "problem", "analysis", "analytical")),
    ("Conversational", ("chat", "conversation", "assistant", "dialogue", "instruct", "helpful")),
    ("Specialized", ("medical", "legal", "financial", "scientific", "research", "domain", "expert")),
]
DEFAULT_CATEGORY = "General"

# Name fragments of known releases. These go stale as vendors ship; update here.
FRONTIER_MODEL_FRAGMENTS = (
    "gpt-4o", "gpt-4-turbo", "claude-3.5-sonnet", "claude-3-opus", "gemini-1.5-pro", "gemini-2.0",
    "o1-preview", "o1-mini", "llama-3.1-405b", "llama-3.2-90b", "qwen2.5-72b", "deepseek-v3",
)
PRODUCTION_MODEL_FRAGMENTS = (
    "gpt-3.5-turbo", "claude-3-haiku", "claude-3-sonnet", "gemini-1.5-flash", "gemini-pro",
    "llama-3.1-70b", "llama-3.1-8b", "mistral-large", "mixtral-8x7b", "qwen2.5-32b",
)
EXPERIMENTAL_KEYWORDS = (
    "preview", "beta", "alpha", "experimental", "research", "test", "dev", "unstable",
    "snapshot", "nightly",
)
SPECIALIZED_KEYWORDS = (
    "code", "medical", "legal", "finance", "embed", "rerank", "vision", "audio", "translation",
    "summarization", "instruct", "finetune", "reasoning", "math", "science",
)

# Tier magnitude thresholds (parameters in billions, context in tokens)
FRONTIER_MIN_PARAMS = 70
FRONTIER_MIN_CONTEXT = 1_000_000
PRODUCTION_MIN_PARAMS = 7
PRODUCTION_MIN_CONTEXT = 32_000
FALLBACK_PRODUCTION_PARAMS = 30
FALLBACK_PRODUCTION_CONTEXT = 128_000
FALLBACK_STANDARD_PARAMS = 7
FALLBACK_STANDARD_CONTEXT = 16_000

# Context window buckets: (inclusive lower, exclusive upper)
CONTEXT_BUCKET_BOUNDS: dict[ContextBucket, tuple[int, float]] = {
    ContextBucket.SMALL: (0, 32_000),
    ContextBucket.MEDIUM: (32_000, 128_000),
    ContextBucket.LARGE: (128_000, 1_000_000),
    ContextBucket.XLARGE: (1_000_000, float("inf")),
}

SELF_MODERATED_MARKER = "self-moderated"

# Categories in a canonical store that mark retired models
INACTIVE_CATEGORY_IDS = frozenset({6})
INACTIVE_CATEGORY_NAMES = frozenset({"inactive", "hidden"})

# Pricing sanity thresholds (dollars per million tokens)
PRICE_SUSPICIOUSLY_LOW = 0.001
PRICE_SUSPICIOUSLY_HIGH_INPUT = 200
PRICE_SUSPICIOUSLY_HIGH_OUTPUT = 500

# Models whose unusual pricing is known to be correct
PRICING_EXCEPTIONS = ("o1-pro", "gpt-4.5", "gpt 4.5")

PRICE_FIELDS = ("input_text", "output_text", "finetuning_input", "finetuning_output", "training_cost")

EXPORT_FIELDS = [
    "systemName",
    "displayName",
    "categoryName",
    "parametersB",
    "inputText",
    "outputText",
    "vendorName",
    "contextWindow",
    "tokenLimit",
    "precision",
    "isOpenSource",
    "isHidden",
]
