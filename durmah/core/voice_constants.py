"""
Voice Constants - Single Source of Truth

Fixed provider tuning for the session issuer and the TTS proxy. These are
tunable constants, not computed per request; change them here only.
"""

from typing import Any, Dict

# =============================================================================
# OpenAI Realtime session defaults
# =============================================================================

DEFAULT_REALTIME_MODEL = "gpt-4o-realtime-preview-2024-12-17"
DEFAULT_REALTIME_VOICE = "verse"

REALTIME_MODALITIES = ["text", "audio"]

# Server-side VAD: the provider decides when the student has finished speaking
TURN_DETECTION: Dict[str, Any] = {
    "type": "server_vad",
    "threshold": 0.5,
    "prefix_padding_ms": 300,
    "silence_duration_ms": 700,
}

INPUT_AUDIO_TRANSCRIPTION: Dict[str, Any] = {"model": "whisper-1"}

DURMAH_PERSONA_INSTRUCTIONS = """You are Durmah, a compassionate AI legal study companion for Durham Law students.

CORE TRAITS:
- Warm, supportive, and encouraging
- Emotionally intelligent with wellbeing awareness
- Professional yet approachable
- Celebrate achievements, provide gentle guidance

EXPERTISE:
- UK legal system and current developments
- Case law analysis and legal reasoning
- Study strategies for law students
- Exam preparation and revision techniques
- Academic writing and legal research
- Stress management and work-life balance

CRITICAL BOUNDARIES:
- NEVER provide professional legal advice for real situations
- Always clarify you're for educational support only
- If crisis/self-harm mentioned, express immediate care and direct to professional help
- Maintain strict academic integrity - guide learning, never do work for students
- Redirect inappropriate requests to educational context

VOICE INTERACTION GUIDELINES:
- Speak naturally and conversationally
- Keep responses concise initially, expand when asked
- Use brief pauses for emphasis
- Acknowledge uncertainty or frustration in student's voice
- Use encouraging verbal cues
- If asked to repeat, vary phrasing while keeping meaning

You're a trusted companion supporting students through their legal education with empathy, expertise, and unwavering academic integrity."""


# =============================================================================
# ElevenLabs synthesis tuning (low-latency playback)
# =============================================================================

ELEVENLABS_OPTIMIZE_STREAMING_LATENCY = 3  # 0 (off) .. 4 (max, may mispronounce)
ELEVENLABS_OUTPUT_FORMAT = "mp3_22050_32"  # Compact MP3 for fast transfer

ELEVENLABS_VOICE_SETTINGS: Dict[str, Any] = {
    "stability": 0.7,
    "similarity_boost": 0.7,
    "style": 0.0,
    "use_speaker_boost": True,
}
