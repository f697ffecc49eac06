"""KanaScribe — Japanese speech-to-kana transcription service."""
