"""
Tests for tolerant platform model parsing.
"""

from stream_avatar.models import HeadCreateRequest, HeadVisual, Voice


class TestHeadVisual:

    def test_thumbnail_preference(self):
        v = HeadVisual.from_raw({"id": 7, "avatar": "a.png", "posterImage": "p.png"})
        assert v.id == "7"
        assert v.thumbnail == "a.png"
        assert HeadVisual.from_raw({"id": "x", "videoUrl": "v.mp4"}).thumbnail == "v.mp4"
        assert HeadVisual.from_raw({"id": "x"}).thumbnail == ""

    def test_unusable_entries(self):
        assert HeadVisual.from_raw({"name": "no id"}) is None
        assert HeadVisual.from_raw("v1") is None


class TestVoice:

    def test_field_fallbacks(self):
        v = Voice.from_raw({"id": "i1", "ttsVoice": "tts", "languageCode": "fr-FR", "gender": "male"})
        assert v.voice_id == "i1"
        assert v.display_name == "tts"
        assert v.locale == "fr-FR"
        assert v.gender == "male"

    def test_display_name_prefers_display_name(self):
        v = Voice.from_raw({"voiceId": "a", "displayName": "Nice", "name": "raw"})
        assert v.display_name == "Nice"

    def test_label(self):
        assert Voice(voice_id="a", display_name="Rachel", locale="en-US").label == "Rachel (en-US)"
        assert Voice(voice_id="a", display_name="Rachel").label == "Rachel"

    def test_drops_entries_without_id(self):
        assert Voice.from_raw({"name": "Nameless"}) is None
        assert Voice.from_raw(None) is None


class TestHeadCreateRequest:

    def test_payload_shape(self):
        payload = HeadCreateRequest(
            head_visual_id="v1", alias="Helper", tts_voice="voice-a", org_id="org-9"
        ).to_payload()
        assert payload == {
            "headVisualId": "v1",
            "alias": "Helper",
            "name": "Helper",
            "languageSpeechRecognition": "en-US",
            "language": "en-US",
            "operationMode": "oc",
            "ttsProvider": "elevenlabs",
            "ttsVoice": "voice-a",
            "greetings": "",
            "orgId": "org-9",
        }

    def test_org_omitted_when_empty(self):
        payload = HeadCreateRequest(
            head_visual_id="v1", alias="A", tts_voice="x", org_id=""
        ).to_payload()
        assert "orgId" not in payload
