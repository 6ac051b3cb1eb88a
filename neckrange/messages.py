"""
User-facing text for recommendations, level labels and capture feedback.

Templates are keyed by language code and then by message key. Placeholders use
str.format syntax.
"""

from typing import Dict

DEFAULT_LANGUAGE = 'en'

MESSAGES: Dict[str, Dict[str, str]] = {
    'en': {
        # Recommendations
        'asymmetry_significant': (
            "Flexibility on the {side} side of your neck is reduced. "
            "A professional evaluation is recommended."
        ),
        'asymmetry_moderate': "Focus your stretching on the {side} side of your neck.",
        'mobility_restricted': (
            "Your neck range of motion is restricted. Regular stretching or "
            "consulting a professional is recommended."
        ),
        'habitual_stretching': (
            "Making neck stretches a daily habit can be expected to improve your flexibility."
        ),
        'desk_breaks': (
            "During desk work, take a break every hour to move your neck and shoulders."
        ),
        'maintain_mobility': (
            "You have a healthy neck range of motion. Keep maintaining it."
        ),
        'side_right': 'right',
        'side_left': 'left',

        # Level labels
        'flexibility_stiff': 'Stiff',
        'flexibility_somewhat_stiff': 'Somewhat stiff',
        'flexibility_normal': 'Normal',
        'flexibility_flexible': 'Flexible',
        'asymmetry_normal': 'Normal',
        'asymmetry_mild': 'Mild asymmetry',
        'asymmetry_moderate_label': 'Moderate asymmetry',
        'asymmetry_significant_label': 'Significant asymmetry',

        # Capture feedback
        'capture_ok': 'Good posture. Angle: {angle:.1f}°',
        'no_pose': (
            "No pose was detected. Make sure your head and shoulders are fully in frame."
        ),
        'missing_landmark': (
            "Required body parts were not detected ({landmarks}). "
            "Adjust the camera so your head and shoulders are visible."
        ),
        'shoulder_tilt_exceeded': (
            "Your shoulders are tilted by {angle:.1f}°. Keep your shoulders still, "
            "tilt only your neck and capture again."
        ),
        'shoulder_level_ok': 'Shoulders are level.',
        'degenerate_geometry': (
            "The shoulder positions could not be separated. Face the camera and capture again."
        ),
        'landmarks_visible': 'All required body parts were detected.',
    },
    'ja': {
        'asymmetry_significant': '{side}側の首の柔軟性が低下しています。専門家の診断をお勧めします。',
        'asymmetry_moderate': '{side}側へのストレッチを重点的に行うことをお勧めします。',
        'mobility_restricted': '首の可動域が制限されています。定期的なストレッチや専門家への相談をお勧めします。',
        'habitual_stretching': '首のストレッチを習慣化することで、柔軟性の改善が期待できます。',
        'desk_breaks': 'デスクワークの際は、1時間に一度は首や肩を動かす休憩を取りましょう。',
        'maintain_mobility': '良好な首の可動域を保っています。この状態を維持しましょう。',
        'side_right': '右',
        'side_left': '左',

        'flexibility_stiff': '硬い',
        'flexibility_somewhat_stiff': 'やや硬い',
        'flexibility_normal': '普通',
        'flexibility_flexible': '柔軟',
        'asymmetry_normal': '正常',
        'asymmetry_mild': '軽度の左右差',
        'asymmetry_moderate_label': '中等度の左右差',
        'asymmetry_significant_label': '顕著な左右差',

        'capture_ok': '良好な姿勢です。角度: {angle:.1f}°',
        'no_pose': '姿勢を検出できませんでした。頭と肩が画面に映っているか確認してください。',
        'missing_landmark': '必要な部位が検出されませんでした（{landmarks}）。頭と肩が映るように調整してください。',
        'shoulder_tilt_exceeded': '肩が {angle:.1f}° 傾いています。肩を動かさずに首だけを傾けて撮り直してください。',
        'shoulder_level_ok': '肩は水平です。',
        'degenerate_geometry': '肩の位置を判別できませんでした。正面を向いて撮り直してください。',
        'landmarks_visible': 'すべての必要な部位が検出されました。',
    },
}

SUPPORTED_LANGUAGES = tuple(MESSAGES.keys())


def get_message(key: str, language: str = DEFAULT_LANGUAGE, **kwargs) -> str:
    """
    Look up and format a message template.

    Args:
        key: Message key
        language: Language code ('en' or 'ja')
        **kwargs: Template placeholders

    Returns:
        Formatted message

    Raises:
        ValueError: If the language is not supported
    """
    if language not in MESSAGES:
        raise ValueError(
            f"Unsupported language: {language}. "
            f"Supported languages: {list(SUPPORTED_LANGUAGES)}"
        )
    template = MESSAGES[language][key]
    return template.format(**kwargs) if kwargs else template
