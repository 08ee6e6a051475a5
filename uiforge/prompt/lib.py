"""PromptBuilder for UI mockup generation prompts.

Assembles system instructions and user prompts from fixed design rules,
theme and architecture directives, existing screens, and chat history.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass

from uiforge.project import (
    Architecture,
    ChatMessage,
    DesignSystem,
    Overview,
    ScreenDefinition,
    Theme,
)

DESIGN_RULES = """
You are an elite cross-platform UI/UX designer creating Dribbble-quality HTML for BOTH mobile and web using Tailwind CSS and CSS variables.

# CRITICAL NAVIGATION CONSISTENCY
In a real application, the Navigation (Bottom Bar, Sidebar, or Top Header) stays EXACTLY the same across screens.
1. SCAN existing screens (if provided) for their navigation HTML.
2. REPLICATE that navigation block IDENTICALLY in any new screens.
3. Update ONLY the "active" or "selected" state within the navigation.
4. Icons, labels, and order must be 100% consistent across the entire project.

# OUTPUT RULES
1. Output HTML ONLY - Start with <div, no markdown, no JS, no comments
2. No scripts, no canvas - SVG ONLY for charts
3. Images: Use https://i.pravatar.cc/150?u=NAME for avatars.
4. THEME VARIABLES: Use existing CSS variables (var(--background), etc).
5. User visual instructions override defaults.

# VISUAL STYLE
- Premium, glossy, modern (Dribbble style).
- Glassmorphism: bg-[var(--card)]/70 backdrop-blur-xl.
- Soft glow highlights.
- Gradients: bg-gradient-to-r from-[var(--primary)] to-[var(--accent)].

# FONT RULE (STRICT)
- designSystem.font MUST be a single font family name only.
- Example: "Inter"
- NEVER include fallbacks like ", sans-serif"
- Fallbacks are handled by CSS, not designSystem.

# IMAGE RULES (STRICT)
DO NOT use via.placeholder.com
DO NOT use placehold.it
DO NOT use dummyimage.com

Use ONLY:
- https://picsum.photos/seed/{unique}/{width}/{height}
- https://i.pravatar.cc/150?u=NAME (avatars only)
- https://images.unsplash.com (real photos)

If an image is required and no real asset is available:
Use: https://picsum.photos/seed/ui/{width}/{height}

# ROOT LAYOUT
- Root container: class="relative w-full min-h-screen bg-[var(--background)] flex flex-col lg:flex-row"
"""

ANALYSIS_DIRECTIVE = """
You are a Lead Cross-Platform UI/UX Designer.
Return JSON describing responsive screens.
# NAVIGATION RULES
- MOBILE: Floating bottom nav.
- WEB: Sidebar OR Topbar.
- Navigation structure MUST be identical across screens.
"""

NEW_SCREEN_SYSTEM_INSTRUCTION = "Elite UI/UX engineer. Return JSON."
MODIFY_SYSTEM_INSTRUCTION = "Refine this screen while maintaining structure."
NO_EXISTING_SCREENS = "No existing screens."
SCREEN_SEPARATOR = "\n\n---\n\n"


@dataclass(frozen=True)
class PromptPair:
    """System instruction and user prompt for one provider call.

    Attributes:
        system_instruction: Instruction sent in the system slot (may be empty).
        user_prompt: Text sent as the user turn.
    """

    system_instruction: str
    user_prompt: str

    @property
    def total_tokens_estimate(self) -> int:
        """Rough token count of both parts."""
        return (len(self.system_instruction) + len(self.user_prompt)) // 4


def format_chat_history(chat_history: Sequence[ChatMessage] | None) -> str:
    """Render chat messages as ``ROLE: content`` lines."""
    if not chat_history:
        return ""
    return "\n".join(
        f"{message.role.value.upper()}: {message.content}" for message in chat_history
    )


def format_existing_screens(screens: Sequence[ScreenDefinition] | None) -> str:
    """List screens by name, id and verbatim markup for carry-over."""
    if not screens:
        return NO_EXISTING_SCREENS
    return SCREEN_SEPARATOR.join(
        f"SCREEN: {screen.name} (ID: {screen.id})\nMARKUP:\n{screen.markup}"
        for screen in screens
    )


class PromptBuilder:
    """Builds prompts for each generation operation.

    Every builder reads its inputs without modifying them.

    Example:
        >>> builder = PromptBuilder()
        >>> pair = builder.build_artifact_prompt(
        ...     "a habit tracker app", Theme.DARK, Architecture.APP
        ... )
        >>> print(pair.user_prompt)
        USER REQUEST: "a habit tracker app"
    """

    def __init__(self, design_rules: str = DESIGN_RULES):
        """Initialize PromptBuilder.

        Args:
            design_rules: Rules block shared by all screen-producing prompts.
        """
        self._rules = design_rules

    @property
    def design_rules(self) -> str:
        """Rules block included in every screen-producing prompt."""
        return self._rules

    def build_artifact_prompt(
        self,
        prompt: str,
        theme: Theme,
        architecture: Architecture,
        existing_screens: Sequence[ScreenDefinition] | None = None,
        chat_history: Sequence[ChatMessage] | None = None,
    ) -> PromptPair:
        """Build the prompt pair for full project generation.

        Args:
            prompt: Raw product request.
            theme: Mandatory color mode.
            architecture: Target platform.
            existing_screens: Prior screens to carry over, if any.
            chat_history: Conversation so far.

        Returns:
            PromptPair with the composed system instruction.
        """
        theme_name = theme.value.upper()
        system_instruction = f"""
{ANALYSIS_DIRECTIVE}
# DESIGN LANGUAGE & CODING RULES
{self._rules}
# UI THEME (STRICT)
The product UI MUST be rendered in {theme_name} MODE.
- Do NOT mix light and dark styles
- Backgrounds, cards, text, borders must match this theme
- Assume users expect consistency

Theme: {theme_name}
Architecture: {architecture.value.upper()}.
# INCREMENTAL UPDATE
- Return ENTIRE project state (screens array).
# EXISTING SCREENS
{format_existing_screens(existing_screens)}
# CHAT CONTEXT
{format_chat_history(chat_history)}
"""
        return PromptPair(
            system_instruction=system_instruction,
            user_prompt=self.build_user_request(prompt),
        )

    def build_user_request(self, prompt: str) -> str:
        """Quote the raw request as a single line."""
        return f'USER REQUEST: "{prompt}"'

    def build_new_screen_prompt(
        self,
        purpose: str,
        design_system: DesignSystem,
        overview: Overview,
        existing_screens: Sequence[ScreenDefinition],
    ) -> PromptPair:
        """Build the prompt pair for adding one screen to a project."""
        screens = SCREEN_SEPARATOR.join(
            f"SCREEN: {screen.name}\n{screen.markup}" for screen in existing_screens
        )
        design_json = json.dumps(design_system.model_dump(by_alias=True))
        user_prompt = f"""
Generate ONE new screen for "{overview.name}".
PURPOSE: {purpose}
# NAVIGATION CONSISTENCY
Identify and copy the navigation block from existing screens.
# EXISTING SCREENS
{screens}
# DESIGN SYSTEM
{design_json}
{self._rules}
"""
        return PromptPair(
            system_instruction=NEW_SCREEN_SYSTEM_INSTRUCTION,
            user_prompt=user_prompt,
        )

    def build_modify_prompt(
        self,
        screen_name: str,
        current_markup: str,
        instruction: str,
        chat_history: Sequence[ChatMessage] | None = None,
    ) -> PromptPair:
        """Build the prompt pair for refining one screen's markup."""
        user_prompt = f"""
Refine screen: {screen_name}
INSTRUCTION: {instruction}
# CONTEXT
{format_chat_history(chat_history)}
{self._rules}
CURRENT MARKUP:
{current_markup}
"""
        return PromptPair(
            system_instruction=MODIFY_SYSTEM_INSTRUCTION,
            user_prompt=user_prompt,
        )

    def build_refine_prompt(self, rough_prompt: str) -> PromptPair:
        """Build the free-text prompt for idea refinement."""
        return PromptPair(
            system_instruction="",
            user_prompt=f'Refine app idea: "{rough_prompt}"',
        )


__all__ = [
    "PromptBuilder",
    "PromptPair",
    "format_chat_history",
    "format_existing_screens",
    "DESIGN_RULES",
    "ANALYSIS_DIRECTIVE",
    "NO_EXISTING_SCREENS",
]
