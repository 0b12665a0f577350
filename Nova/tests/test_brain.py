"""
Test Suite — Command Interpreter
==================================
Prompt construction, the Ollama REST client (requests patched) and the
interpreter's error mapping.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from Nova.core.brain import (
    GENERATION_OPTIONS, CommandInterpreter, OllamaClient, build_prompt,
)
from Nova.core.errors import MalformedModelOutput, ModelUnavailable


def _response(status=200, body=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body if body is not None else {}
    if status >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(response=resp)
    else:
        resp.raise_for_status.return_value = None
    return resp


# ════════════════════════════════════════════════════════════════════════════
#  Prompt Tests
# ════════════════════════════════════════════════════════════════════════════

class TestBuildPrompt:

    def test_deterministic(self):
        a = build_prompt("open chrome", "Platform: darwin", ["Safari", "Slack"])
        b = build_prompt("open chrome", "Platform: darwin", ["Safari", "Slack"])
        assert a == b

    def test_embeds_context_and_apps(self):
        prompt = build_prompt("open chrome", "Platform: darwin\nRunning Apps: Finder", ["Safari", "Slack"])
        assert "CONTEXT:\nPlatform: darwin\nRunning Apps: Finder" in prompt
        assert "AVAILABLE APPLICATIONS:\nSafari, Slack" in prompt
        assert prompt.endswith("User Command: open chrome")

    def test_lists_all_action_types(self):
        prompt = build_prompt("x", "", [])
        for name in ("launch", "open", "close", "arrange", "focus", "set_dnd", "browser_tab"):
            assert f'"{name}"' in prompt

    def test_contains_worked_example(self):
        prompt = build_prompt("x", "", [])
        assert '{"type": "launch", "target": "Chrome"' in prompt

    def test_workspace_optional(self):
        assert "CURRENT WORKSPACE" not in build_prompt("x", "", [])
        assert "CURRENT WORKSPACE: Deep Work" in build_prompt("x", "", [], workspace="Deep Work")


# ════════════════════════════════════════════════════════════════════════════
#  Ollama Client Tests
# ════════════════════════════════════════════════════════════════════════════

class TestOllamaClient:

    @pytest.fixture
    def client(self):
        return OllamaClient(base_url="http://ollama.test:11434/", model="llama3.2:latest", timeout=60)

    @patch("Nova.core.brain.requests.post")
    def test_generate_payload(self, mock_post, client):
        mock_post.return_value = _response(body={
            "model": "llama3.2:latest", "created_at": "now", "response": "[]", "done": True,
        })
        assert client.generate("hello") == "[]"

        url = mock_post.call_args.args[0]
        kwargs = mock_post.call_args.kwargs
        assert url == "http://ollama.test:11434/api/generate"
        assert kwargs["timeout"] == 60
        assert kwargs["json"] == {
            "model": "llama3.2:latest",
            "prompt": "hello",
            "stream": False,
            "options": {
                "temperature": GENERATION_OPTIONS.temperature,
                "top_p": GENERATION_OPTIONS.top_p,
                "top_k": GENERATION_OPTIONS.top_k,
                "repeat_penalty": GENERATION_OPTIONS.repeat_penalty,
            },
        }

    @patch("Nova.core.brain.requests.post")
    def test_missing_response_field_is_empty_text(self, mock_post, client):
        mock_post.return_value = _response(body={"done": True})
        assert client.generate("hello") == ""

    @patch("Nova.core.brain.requests.post")
    def test_connection_error(self, mock_post, client):
        mock_post.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(ModelUnavailable):
            client.generate("hello")

    @patch("Nova.core.brain.requests.post")
    def test_timeout(self, mock_post, client):
        mock_post.side_effect = requests.exceptions.Timeout()
        with pytest.raises(ModelUnavailable) as exc:
            client.generate("hello")
        assert "60s" in str(exc.value)

    @patch("Nova.core.brain.requests.post")
    def test_http_error(self, mock_post, client):
        mock_post.return_value = _response(status=500)
        with pytest.raises(ModelUnavailable) as exc:
            client.generate("hello")
        assert "500" in str(exc.value)

    @patch("Nova.core.brain.requests.post")
    def test_non_json_body(self, mock_post, client):
        resp = _response()
        resp.json.side_effect = ValueError("not json")
        mock_post.return_value = resp
        with pytest.raises(ModelUnavailable):
            client.generate("hello")

    @patch("Nova.core.brain.requests.post")
    @pytest.mark.parametrize("reply", [True, 42, ["a"], {"k": "v"}])
    def test_non_text_response_field(self, mock_post, client, reply):
        mock_post.return_value = _response(body={"response": reply, "done": True})
        with pytest.raises(ModelUnavailable, match="unexpected body"):
            client.generate("hello")

    @patch("Nova.core.brain.requests.get")
    def test_health_check(self, mock_get, client):
        mock_get.return_value = _response(status=200)
        assert client.health_check() is True
        mock_get.assert_called_once_with("http://ollama.test:11434/api/tags", timeout=5)

    @patch("Nova.core.brain.requests.get")
    def test_health_check_unreachable(self, mock_get, client):
        mock_get.side_effect = requests.exceptions.ConnectionError()
        assert client.health_check() is False

    @patch("Nova.core.brain.requests.get")
    def test_list_models(self, mock_get, client):
        mock_get.return_value = _response(body={"models": [{"name": "llama3.2:latest"}, {"name": "gemma:2b"}, {}]})
        assert client.list_models() == ["llama3.2:latest", "gemma:2b"]

    @patch("Nova.core.brain.requests.get")
    def test_list_models_failure_is_empty(self, mock_get, client):
        mock_get.side_effect = requests.exceptions.ConnectionError()
        assert client.list_models() == []

    def test_update_model_and_url(self, client):
        client.set_model("gemma:2b")
        client.set_base_url("http://other:1234/")
        assert client.model == "gemma:2b"
        assert client.base_url == "http://other:1234"


# ════════════════════════════════════════════════════════════════════════════
#  Interpreter Tests
# ════════════════════════════════════════════════════════════════════════════

class TestCommandInterpreter:

    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.base_url = "http://localhost:11434"
        client.model = "llama3.2:latest"
        return client

    def test_interpret_extracts_actions(self, client):
        client.generate.return_value = (
            'Sure! [{"type":"launch","target":"Chrome","params":{"urls":["https://a.com"]}}] Hope that helps.'
        )
        actions = CommandInterpreter(client).interpret("open a.com in chrome", "ctx", ["Google Chrome"])
        assert len(actions) == 1
        assert actions[0].params == {"urls": ["https://a.com"]}

    def test_prompt_sent_once(self, client):
        client.generate.return_value = "[]"
        CommandInterpreter(client).interpret("do it", "ctx", ["Safari"], workspace="Home")
        client.generate.assert_called_once()
        prompt = client.generate.call_args.args[0]
        assert prompt == build_prompt("do it", "ctx", ["Safari"], "Home")

    def test_malformed_reply_not_retried(self, client):
        client.generate.return_value = "I cannot help with that."
        with pytest.raises(MalformedModelOutput):
            CommandInterpreter(client).interpret("x", "ctx", [])
        assert client.generate.call_count == 1

    def test_model_unavailable_propagates(self, client):
        client.generate.side_effect = ModelUnavailable("down")
        with pytest.raises(ModelUnavailable):
            CommandInterpreter(client).interpret("x", "ctx", [])
