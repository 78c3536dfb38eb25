from .models import GenerationMode, GenerationRequest, ModelMode, ReferenceMode

# ===================== PROMPTS =====================

REFERENCE_STYLE_PROMPT = (
    "Generate 1 product photo that matches the style of the reference photo. "
    "The logo, text, shape, and product color must not be altered."
)

MODEL_PROMPT = (
    "Generate a professional photo of the provided model holding or wearing the product. "
    "Add supporting props to make the photo more appealing. "
    "It is absolutely crucial that the model's face remains consistent and unchanged from the source photo. "
    "Do not alter the facial features. "
    "Create a unique variation with a different body pose, facial expression, lighting, composition, or camera angle."
)

PRODUCT_ONLY_PROMPT = (
    "Generate a professional variation of the product in the image with different lighting, "
    "composition, and camera angles. "
    "Add supporting props to make the product photo more appealing."
)


def _base_prompt(mode: GenerationMode) -> str:
    if isinstance(mode, ReferenceMode):
        return REFERENCE_STYLE_PROMPT
    if isinstance(mode, ModelMode):
        return MODEL_PROMPT
    return PRODUCT_ONLY_PROMPT


def build_instruction(req: GenerationRequest, mode: GenerationMode) -> str:
    instruction = _base_prompt(mode)

    theme = req.effective_theme()
    if theme:
        instruction += f" The theme should be: {theme}."

    extra = (req.extra_instructions or "").strip()
    if extra:
        instruction += f" Additional instructions: {extra}."

    return instruction
