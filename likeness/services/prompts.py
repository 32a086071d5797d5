"""Prompt templates for model requests."""
from typing import Optional

FACIAL_FEATURE_ASPECTS = (
    "face shape, eyes, nose, mouth, skin tone, hair, and distinctive features"
)

FACE_DESCRIPTION_PROMPT = """Analyze this facial photograph and provide a detailed, objective description of the person's distinctive facial features. Focus on:
- Face shape and structure
- Eye shape, color, and spacing
- Nose shape and size
- Mouth and lip characteristics
- Skin tone and texture
- Hair color and style
- Any distinctive features (freckles, moles, etc.)
- Overall facial proportions

Be precise and detailed. This description will be used for identity consistency."""

VIDEO_ANALYSIS_PROMPT = (
    "You are an expert AI model analyst. Your task is to analyze the provided video data and "
    "generate a detailed report on its suitability for training a high-fidelity actor likeness "
    "model. Identify potential gaps in emotional range or body posture representation."
)

DATA_QUALITY_PROMPT = """You are an expert video quality analyst for AI training data. Analyze the provided video and generate a comprehensive quality report.

Evaluate the following aspects:

1. **Resolution**: Assess video resolution. Score 1.0 for 1080p+, 0.7 for 720p, 0.4 for 480p, 0.0 for lower.

2. **Lighting**: Evaluate lighting quality. Score 1.0 for consistent, well-lit footage. Deduct for harsh shadows, overexposure, underexposure, or inconsistent lighting. List specific issues.

3. **Face Visibility**: Determine what percentage of frames show a clearly visible face. Score based on visibility percentage and clarity.

4. **Motion Blur**: Detect if motion blur is present. Score 1.0 if no blur, 0.5 if minor blur, 0.0 if significant blur.

5. **Diversity**: Assess variety in camera angles and facial expressions. Score based on how many different angles (frontal, profile, 3/4, etc.) and expressions are captured.

6. **Recommendations**: Provide 3-5 specific, actionable recommendations to improve data quality.

Calculate an overall score as the weighted average:
- Resolution: 20%
- Lighting: 25%
- Face Visibility: 30%
- Motion Blur: 10%
- Diversity: 15%"""


def content_description_prompt(identity_description: Optional[str] = None) -> str:
    """Prompt asking for the facial features visible in generated content."""
    prompt = (
        "Analyze this image/video and provide a detailed description of the person's facial "
        f"features. Focus on the same aspects as identity descriptions: {FACIAL_FEATURE_ASPECTS}."
    )
    if identity_description:
        prompt += (
            "\n\nStructure your description like this reference description, but describe only "
            f"what is visible in the content:\n{identity_description}"
        )
    return prompt


def emotion_clip_prompt(
    emotion: str,
    intensity: Optional[str] = None,
    preserve_identity: bool = False,
) -> str:
    """Prompt for animating a still image into an emotion clip."""
    intensity_text = f" at {intensity} intensity" if intensity else ""
    identity_text = (
        " Maintain exact facial structure, skin tone, and distinctive features of this specific person."
        if preserve_identity
        else ""
    )
    return (
        "Animate this specific person in the image. Create a short video clip where their facial "
        f"expression changes to show that they are feeling {emotion}{intensity_text}.{identity_text} "
        f"Focus on authentic {emotion} expression while preserving their unique likeness."
    )
