"""Randomized prompt generation from fixed word banks.

A prompt is rendered as ``"{subject}, {style}, {mood} mood, {extra}"``.
"""

import random

__all__ = ["EXTRAS", "MOODS", "STYLES", "SUBJECTS", "generate_prompt", "generate_prompts"]

SUBJECTS: tuple[str, ...] = (
    "a majestic dragon perched on a crystal mountain",
    "a cyberpunk samurai walking through neon-lit rain",
    "an enchanted forest with bioluminescent mushrooms",
    "a steampunk airship floating above Victorian London",
    "a cosmic whale swimming through a nebula",
    "a robot artist painting in a sunlit studio",
    "a mystical phoenix rising from emerald flames",
    "an underwater city with coral architecture",
    "a warrior princess standing atop ancient ruins",
    "a floating island garden above the clouds",
    "a sentient tree in an alien desert landscape",
    "a wise owl perched on a glowing crystal",
    "a mermaid sitting on rocks during a sunset",
    "a time-traveler in a futuristic marketplace",
    "a knight riding a mechanical horse through fog",
    "a witch's cottage surrounded by magical herbs",
    "a space station orbiting a ringed gas giant",
    "a wolf made of starlight howling at twin moons",
    "a fairy village nestled in autumn leaves",
    "a giant tortoise carrying a small civilization",
    "a mysterious lighthouse on a cliff during a storm",
    "an android meditating in a zen garden",
    "a flying carpet soaring over Moroccan bazaars",
    "a crystal cave with rainbow reflections",
    "a samurai standing in a field of cherry blossoms",
    "a polar bear on an iceberg under northern lights",
    "a vintage car driving through a desert at sunset",
    "a magical library with floating glowing books",
    "a surreal clock melting over a dreamscape",
    "a phoenix-winged cat sitting on a rooftop",
)

STYLES: tuple[str, ...] = (
    "hyperrealistic digital art, 8k resolution, ultra-detailed",
    "Studio Ghibli anime style, warm and whimsical",
    "oil painting with dramatic chiaroscuro lighting",
    "watercolor illustration with soft pastel tones",
    "dark fantasy concept art, moody atmosphere",
    "retro synthwave aesthetic with neon colors",
    "minimalist vector art with bold colors",
    "photorealistic render, cinematic lighting",
    "impressionist painting with vibrant brushstrokes",
    "Art Nouveau style with ornate golden details",
    "cyberpunk digital illustration, high contrast",
    "ethereal dreamy atmosphere, soft focus",
    "comic book style with bold outlines and halftone",
    "ukiyo-e Japanese woodblock print style",
    "surrealist composition inspired by Salvador Dali",
)

MOODS: tuple[str, ...] = (
    "serene and peaceful",
    "dramatic and intense",
    "mysterious and enigmatic",
    "joyful and vibrant",
    "melancholic and wistful",
    "epic and awe-inspiring",
    "cozy and warm",
    "eerie and otherworldly",
    "romantic and nostalgic",
    "futuristic and sleek",
)

EXTRAS: tuple[str, ...] = (
    "volumetric lighting, ray tracing",
    "golden hour lighting, lens flare",
    "atmospheric fog, depth of field",
    "intricate details, ornamental patterns",
    "dynamic composition, rule of thirds",
    "dramatic shadows, high contrast",
    "soft ambient light, pastel palette",
    "vivid saturated colors, sharp focus",
    "motion blur, dynamic energy",
    "macro detail, tilt-shift effect",
)


def _render(subject: str, rng: random.Random) -> str:
    return f"{subject}, {rng.choice(STYLES)}, {rng.choice(MOODS)} mood, {rng.choice(EXTRAS)}"


def generate_prompt(rng: random.Random | None = None) -> str:
    """Build one prompt from a uniform pick in each word bank."""
    rng = rng or random.Random()
    return _render(rng.choice(SUBJECTS), rng)


def generate_prompts(count: int, rng: random.Random | None = None) -> list[str]:
    """Build ``count`` prompts, avoiding repeated subjects within the batch.

    Subjects are drawn with a rejection loop while unused subjects remain;
    once every subject has been used, repeats are allowed.

    Args:
        count: Number of prompts to build
        rng: Random source, for reproducible output

    Returns:
        List of prompts, empty when ``count`` is not positive
    """
    rng = rng or random.Random()
    prompts: list[str] = []
    used: set[int] = set()

    for _ in range(max(count, 0)):
        index = rng.randrange(len(SUBJECTS))
        while index in used and len(used) < len(SUBJECTS):
            index = rng.randrange(len(SUBJECTS))
        used.add(index)
        prompts.append(_render(SUBJECTS[index], rng))

    return prompts
