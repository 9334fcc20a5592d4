"""
Model providers for the NaturaCode model-call commands.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..observability.logging_utils import redact_event

log = logging.getLogger(__name__)


class ModelProvider(ABC):
    """Abstract model provider."""

    def __init__(self, name: str, default_model: str | None = None) -> None:
        self.name = name
        self.default_model = default_model
        self.latency_ms: float = 0.0

    @abstractmethod
    def invoke(self, messages: List[Dict[str, str]], **kwargs: Any) -> Dict[str, Any]:
        """Invoke the provider with a chat-style messages array."""


NLP_BENEFITS_REPLY = """Natural language programming offers several key benefits:

1. **Accessibility**: Makes coding approachable for non-programmers by using familiar English syntax
2. **Reduced Learning Curve**: Eliminates the need to memorize complex syntax rules and symbols
3. **Intuitive Logic**: Mirrors how humans naturally think about problem-solving
4. **Better Readability**: Code becomes self-documenting and easier to understand
5. **Lower Barriers**: Democratizes programming by making it more inclusive

For example, instead of writing 'for(int i=0; i<10; i++)' you can simply say 'repeat 10 times'. This makes the intent immediately clear to anyone reading the code."""

ACCESSIBILITY_REPLY = """Here's a specific example of how natural language programming improves accessibility:

**Traditional Code:**
```javascript
if (user.age >= 18 && user.hasValidID) {
    console.log("Access granted");
} else {
    console.log("Access denied");
}
```

**Natural Language Code:**
```
if age is above 17 and has_valid_id is equal to true, show "Access granted" otherwise show "Access denied"
```

The natural language version immediately communicates the logic to anyone, regardless of their programming background. A business analyst, teacher, or domain expert can read, understand, and even suggest improvements without knowing programming syntax."""

COMPARISON_REPLY = """**Natural Language Programming vs Traditional Syntax:**

**Traditional Programming:**
- Dense, symbol-heavy syntax ({}; [] && ||)
- Requires memorization of language-specific rules
- High cognitive load for beginners
- Often cryptic variable names and operations
- Steep learning curve

**Natural Language Programming:**
- Readable, conversational syntax
- Uses familiar English words and phrases
- Intuitive logical flow
- Self-documenting code
- Immediate accessibility

**Example Comparison:**

Traditional: `while(x < 100) { x += 10; console.log(x); }`
Natural: `while x is below 100, add 10 to x, show x`

The natural language version reads like instructions you'd give to a colleague, making programming more human-centered and inclusive."""

GENERIC_REPLY = """I understand you're asking about "{message}". This is a mock response from the {model} model via MCP.

In a real implementation, this would connect to an actual LLM through the Model Context Protocol, enabling seamless integration between NaturaCode and various AI models for intelligent code assistance, natural language processing, and automated reasoning.

The beauty of integrating LLMs with natural language programming is that both humans and AI can understand and work with the same readable code format."""

# Checked in order against the lower-cased user message.
KEYWORD_REPLIES = (
    ("natural language programming", NLP_BENEFITS_REPLY),
    ("accessibility", ACCESSIBILITY_REPLY),
    ("compare", COMPARISON_REPLY),
)


def select_canned_reply(user_message: str, model: str) -> str:
    lowered = user_message.lower()
    for keyword, reply in KEYWORD_REPLIES:
        if keyword in lowered:
            return reply
    return GENERIC_REPLY.format(message=user_message, model=model)


class MockModelProvider(ModelProvider):
    """Deterministic provider that answers from a small table of canned replies."""

    def __init__(self, name: str = "mock", default_model: str | None = None, latency_ms: float = 0.0) -> None:
        super().__init__(name, default_model=default_model or "mock-model")
        self.latency_ms = latency_ms

    def invoke(self, messages: List[Dict[str, str]], **kwargs: Any) -> Dict[str, Any]:
        model = kwargs.get("model") or self.default_model or "mock-model"
        user_content = ""
        for message in reversed(messages):
            if message.get("role") == "user":
                user_content = message.get("content", "")
                break
        metadata = {"provider": self.name, "latency_ms": self.latency_ms, **(kwargs.get("metadata") or {})}
        log.debug(
            "model request %s", redact_event({"model": model, "content": user_content, "metadata": metadata})
        )
        if self.latency_ms > 0:
            time.sleep(self.latency_ms / 1000.0)
        return {
            "provider": self.name,
            "model": model,
            "messages": messages,
            "result": select_canned_reply(user_content, model),
        }
