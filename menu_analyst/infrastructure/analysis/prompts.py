SYSTEM_INSTRUCTION = (
    "You are \"GastroAnalyst\", an advanced AI assistant specialized in hospitality and menu optimization. "
    "Your goal is to help restaurant owners analyze their own offer and compare it with the competition, "
    "always giving expert, professional commentary from the perspective of an experienced F&B Manager "
    "and Head Chef. Your tone is expert, confident, constructive and encouraging. "
    "Every analysis MUST end with concrete, actionable advice for improvement. "
    "Use markdown for formatting (**bold** for headings, *italics* for emphasis, and dash lists -)."
)

STRUCTURE_SYSTEM_INSTRUCTION = "Return only valid JSON. Do not include markdown or extra text."

_MENU_SCHEMA = (
    "Output schema:\n"
    "  {\"dishes\": [{\"name\": \"...\", \"description\": \"...\", \"price\": \"...\"}, ...]}\n"
    "Rules:\n"
    "  - One entry per dish, in the order they appear on the menu.\n"
    "  - name and price are required; description may be omitted when the menu has none.\n"
    "  - Keep prices as written (currency symbols allowed).\n"
)


def build_structure_text_prompt(text: str) -> str:
    return (
        "Read this menu text and structure it as JSON.\n"
        + _MENU_SCHEMA
        + "\n"
        "Menu text:\n\n"
        f"{text}\n"
    )


def build_structure_image_prompt() -> str:
    return (
        "Carefully read all of the text in this menu image. Identify every dish, its description "
        "(if any) and its price. Structure the data as JSON. Be as precise as possible.\n"
        + _MENU_SCHEMA
    )


def build_analyze_prompt(menu_json: str, criteria: str) -> str:
    return (
        f"Analyze the following menu based on these criteria: \"{criteria}\".\n\n"
        f"Menu (JSON format):\n{menu_json}\n"
    )


def build_compare_prompt(user_menu_json: str, competitor_menu_json: str, keywords: str | None) -> str:
    if keywords:
        head = f"Compare these two menus with particular focus on the following keywords: \"{keywords}\".\n\n"
    else:
        head = (
            "Make a general comparison of these two menus. Cover how similar the offer is, "
            "the price ranges and what is unique about each offer.\n\n"
        )
    return (
        head
        + f"My menu:\n{user_menu_json}\n\n"
        + f"Competitor menu:\n{competitor_menu_json}\n"
    )
