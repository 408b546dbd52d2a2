import pytest

from chatrelay.models import Message
from chatrelay.prompt_format import FormatFamily, classify_model, format_prompt


def msgs(*pairs):
    return [Message(role=role, content=content) for role, content in pairs]


CONVERSATION = msgs(
    ("system", "Be brief."),
    ("user", "Hi"),
    ("assistant", "Hello!"),
    ("user", "How are you?"),
)


@pytest.mark.parametrize(
    "model_id,family",
    [
        ("Meta-Llama3.1-70B", FormatFamily.LLAMA3),
        ("llama3.1-instruct", FormatFamily.LLAMA3),
        ("MetaAI_Llama-4_Scout", FormatFamily.LLAMA3),
        ("llama3-8b", FormatFamily.LLAMA3),
        ("Llama-3.3-70B", FormatFamily.LLAMA3),
        ("llama2", FormatFamily.LLAMA2),
        ("codellama-13b", FormatFamily.LLAMA2),
        ("MistralAI_Nemo", FormatFamily.MISTRAL),
        ("codestral-latest", FormatFamily.MISTRAL),
        ("Anthropic_Claude_Haiku", FormatFamily.CLAUDE),
        ("xAI_Grok-2", FormatFamily.GROK),
        ("DeepSeek_R1", FormatFamily.LLAMA2),
        ("OpenAI_GPT4o-mini", FormatFamily.SIMPLE_CHAT),
        ("Google_Gemini_Flash", FormatFamily.SIMPLE_CHAT_NO_SYSTEM),
        ("gemini-pro", FormatFamily.SIMPLE_CHAT_NO_SYSTEM),
        ("qwen2.5", FormatFamily.DEFAULT),
        ("", FormatFamily.DEFAULT),
    ],
)
def test_classify_model(model_id, family):
    assert classify_model(model_id) == family


def test_first_matching_rule_wins():
    # llama2 rule is checked before deepseek, mistral before claude
    assert classify_model("deepseek-llama3") == FormatFamily.LLAMA3
    assert classify_model("claude-on-mistral") == FormatFamily.MISTRAL
    assert classify_model("openai-google-proxy") == FormatFamily.SIMPLE_CHAT


def test_llama3():
    prompt = format_prompt(msgs(("system", "S"), ("user", "U"), ("assistant", "A"), ("tool", "T")), "llama3.1")
    assert prompt == (
        "<|begin_of_text|>"
        "<|start_header_id|>system<|end_header_id|>\n\nS<|eot_id|>"
        "<|start_header_id|>user<|end_header_id|>\n\nU<|eot_id|>"
        "<|start_header_id|>assistant<|end_header_id|>\n\nA<|eot_id|>"
        "<|start_header_id|>user<|end_header_id|>\n\nT<|eot_id|>"
        "<|start_header_id|>assistant<|end_header_id|>\n\n"
    )


def test_llama2_with_system():
    prompt = format_prompt(CONVERSATION, "llama2-70b")
    assert prompt == (
        "<s>[INST] <<SYS>>\nBe brief.\n<</SYS>>\n\n"
        "[INST] Hi [/INST] Hello! </s><s>[INST] How are you? [/INST]"
    )
    assert prompt.count("Be brief.") == 1
    assert "[INST] Be brief." not in prompt


def test_llama2_trims_trailing_sequence_start():
    prompt = format_prompt(msgs(("user", "Hi"), ("assistant", "Hello!")), "codellama")
    assert prompt == "<s>[INST] Hi [/INST] Hello! </s>"
    assert not prompt.endswith("<s>")


def test_llama2_only_leading_system_is_special():
    prompt = format_prompt(msgs(("user", "Hi"), ("system", "late")), "deepseek-coder")
    assert prompt == "<s>[INST] Hi [/INST]"


def test_mistral_skips_system():
    prompt = format_prompt(CONVERSATION, "mistral-7b")
    assert prompt == "<s>[INST] Hi [/INST]Hello!</s>[INST] How are you? [/INST]"


def test_claude():
    prompt = format_prompt(CONVERSATION, "claude-3")
    assert prompt == (
        "Be brief.\n\n"
        "User: Hi\n\n"
        "Assistant: Hello!\n\n"
        "User: How are you?\n\n"
        "Assistant:"
    )


def test_grok():
    prompt = format_prompt(msgs(("system", "S"), ("user", "U"), ("other", "X")), "grok-2")
    assert prompt == "System Instruction:\nS\n\nUser:\nU\n\nAssistant:\n"


def test_simple_chat_openai_keeps_system_role():
    prompt = format_prompt(msgs(("system", "S"), ("user", "U")), "OpenAI_GPT4o")
    assert prompt == "system: S\n\nuser: U"


def test_simple_chat_gemini_inlines_system():
    prompt = format_prompt(msgs(("system", "S"), ("user", "U")), "Google_Gemini")
    assert prompt == "(System Instruction: S)\n\nuser: U"


def test_default():
    prompt = format_prompt(msgs(("system", "S"), ("user", "U")), "unknown-model")
    assert prompt == "<system>: S\n\n<user>: U"


@pytest.mark.parametrize("model_id", ["mistral", "grok", "claude", "openai", "gemini", "whatever"])
@pytest.mark.parametrize("role", ["system", "user", "assistant"])
def test_empty_content_never_raises(model_id, role):
    prompt = format_prompt([Message(role=role, content="")], model_id)
    assert isinstance(prompt, str)


def test_formatting_is_deterministic():
    for model_id in ["llama3", "llama2", "mistral", "claude", "grok", "openai", "gemini", "x"]:
        assert format_prompt(CONVERSATION, model_id) == format_prompt(list(CONVERSATION), model_id)
