import logging
import os

import pyperclip
import pytest

from pmx import __version__
from pmx.errors import (
    EditorError,
    EmptyContentError,
    ExtensionError,
    ProfileExistsError,
    ProfileNotFoundError,
)
from pmx.mcp_server.server import PromptDisabledError, PromptExposure, PromptNotFoundError
from pmx.services import completion_service, editor_service, extension_service
from pmx.services.clipboard_service import ClipboardError, copy_text
from pmx.services.editor_service import ProfileEditor
from pmx.utils.logging import setup_logging


@pytest.fixture
def writing_editor(make_script):
    return make_script("fake-editor", "printf 'Written by editor\\n' > \"$1\"\n")


def test_profile_template_and_emptiness():
    template = editor_service.profile_template("design/plan")

    assert template == "# design/plan\n\n<!-- Add your profile content here -->\n"
    assert editor_service.is_effectively_empty(template)
    assert editor_service.is_effectively_empty("  \n\n")
    assert not editor_service.is_effectively_empty("# Title\nreal text\n")


def test_get_editor_prefers_editor_then_visual():
    assert editor_service.get_editor({"EDITOR": "code --wait", "VISUAL": "vim"}) == ["code", "--wait"]
    assert editor_service.get_editor({"VISUAL": "vim"}) == ["vim"]


def test_get_editor_without_any_editor(monkeypatch):
    monkeypatch.setattr(editor_service.shutil, "which", lambda _name: None)
    with pytest.raises(EditorError, match="No editor found"):
        editor_service.get_editor({})


def test_create_stores_editor_output(repository, writing_editor):
    editor = ProfileEditor(repository, environ={"EDITOR": str(writing_editor)})

    editor.create("fresh")

    assert repository.read("fresh") == "Written by editor\n"


def test_create_with_untouched_template_saves_nothing(repository):
    editor = ProfileEditor(repository, environ={"EDITOR": "true"})

    with pytest.raises(EmptyContentError):
        editor.create("fresh")
    assert not repository.exists("fresh")


def test_create_existing_profile_does_not_open_editor(repository):
    repository.create("taken", "Body\n")
    editor = ProfileEditor(repository, environ={"EDITOR": "false"})

    with pytest.raises(ProfileExistsError, match="Use 'edit'"):
        editor.create("taken")


def test_edit_reports_unchanged_content(repository):
    repository.create("p", "Body\n")
    assert ProfileEditor(repository, environ={"EDITOR": "true"}).edit("p") is False
    assert repository.read("p") == "Body\n"


def test_edit_saves_changes(repository, writing_editor):
    repository.create("p", "Body\n")
    assert ProfileEditor(repository, environ={"EDITOR": str(writing_editor)}).edit("p") is True
    assert repository.read("p") == "Written by editor\n"


def test_edit_failure_keeps_original(repository):
    repository.create("p", "Body\n")
    with pytest.raises(EditorError, match="exited with status 1"):
        ProfileEditor(repository, environ={"EDITOR": "false"}).edit("p")
    assert repository.read("p") == "Body\n"


def test_edit_to_empty_content_is_rejected(repository, make_script):
    repository.create("p", "Body\n")
    blanker = make_script("blanker", "printf '# Only a heading\\n' > \"$1\"\n")

    with pytest.raises(EmptyContentError):
        ProfileEditor(repository, environ={"EDITOR": str(blanker)}).edit("p")
    assert repository.read("p") == "Body\n"


def test_edit_missing_profile(repository):
    with pytest.raises(ProfileNotFoundError):
        ProfileEditor(repository, environ={"EDITOR": "true"}).edit("ghost")


def test_completion_words_for_default_config(repository, storage):
    repository.create("b", "x")
    repository.create("a/x", "x")

    assert completion_service.completion_words(storage, "profiles") == ["a/x", "b"]
    assert completion_service.completion_words(storage, "agents") == ["claude", "codex"]
    commands = completion_service.completion_words(storage, "commands")
    assert "set-claude-profile" in commands
    assert "reset-codex-profile" in commands
    assert commands == sorted(commands)


def test_completion_hides_disabled_agents_and_lists_extensions(rewrite_config):
    storage = rewrite_config(
        '[agents]\ndisable_codex = true\n[extensions]\nallowed_subcommands = ["hello"]\n'
    )

    commands = completion_service.command_names(storage)

    assert completion_service.agent_names(storage) == ["claude"]
    assert "append-claude-profile" in commands
    assert not any("codex" in command for command in commands)
    assert "hello" in commands


def test_completion_rejects_unknown_kind(storage):
    with pytest.raises(ValueError):
        completion_service.completion_words(storage, "files")


@pytest.mark.parametrize("name", ["hello", "my-tool", "tool_2", "a-b-c"])
def test_valid_extension_names(name):
    assert extension_service.is_valid_subcommand_name(name)


@pytest.mark.parametrize("name", ["", "-lead", "trail-", "dou--ble", "has.dot", "a/b", "has space", "../x"])
def test_invalid_extension_names(name):
    assert not extension_service.is_valid_subcommand_name(name)


def test_extension_must_be_allowed(storage):
    with pytest.raises(ExtensionError, match="not allowed"):
        extension_service.execute_extension(storage, ["hello"])


def test_extension_rejects_invalid_and_empty_names(storage):
    with pytest.raises(ExtensionError, match="Invalid subcommand name"):
        extension_service.execute_extension(storage, ["../hello"])
    with pytest.raises(ExtensionError, match="cannot be empty"):
        extension_service.execute_extension(storage, [])


def test_extension_runs_and_returns_exit_code(rewrite_config, make_script, monkeypatch, tmp_path):
    storage = rewrite_config('[extensions]\nallowed_subcommands = ["hello"]\n')
    marker = tmp_path / "args.txt"
    script = make_script("pmx-hello", f'echo "$@" > "{marker}"\nexit 3\n')
    monkeypatch.setenv("PATH", f"{script.parent}:{os.environ['PATH']}")

    code = extension_service.execute_extension(storage, ["hello", "--flag", "value"])

    assert code == 3
    assert marker.read_text().strip() == "--flag value"


def test_allowed_extension_missing_from_path(rewrite_config):
    storage = rewrite_config('[extensions]\nallowed_subcommands = ["absent-tool"]\n')
    with pytest.raises(ExtensionError, match="Failed to execute extension 'pmx-absent-tool'"):
        extension_service.execute_extension(storage, ["absent-tool"])


def test_prompt_listing_and_content(repository, storage):
    repository.create("coding/rust", "Be precise.\n")
    repository.create("review", "Review carefully.\n")
    exposure = PromptExposure(storage)

    prompts = exposure.list_prompts()
    content = exposure.get_prompt("coding/rust")

    assert [(p.name, p.description) for p in prompts] == [
        ("coding/rust", "System prompt: coding/rust"),
        ("review", "System prompt: review"),
    ]
    assert content.name == "coding/rust"
    assert [(m.role, m.text) for m in content.messages] == [("user", "Be precise.\n")]
    assert exposure.server_info() == {
        "name": "pmx-mcp-server",
        "version": __version__,
        "instructions": "This server provides system prompts managed by pmx.",
    }


def test_disabled_prompts_are_hidden_and_refused(repository, rewrite_config):
    repository.create("secret", "x")
    repository.create("public", "y")
    storage = rewrite_config('[mcp]\ndisable_prompts = ["secret"]\n')
    exposure = PromptExposure(storage)

    assert [p.name for p in exposure.list_prompts()] == ["public"]
    with pytest.raises(PromptDisabledError):
        exposure.get_prompt("secret")


def test_all_prompts_disabled(repository, rewrite_config):
    repository.create("public", "y")
    storage = rewrite_config("[mcp]\ndisable_prompts = true\n")

    assert PromptExposure(storage).list_prompts() == []


def test_unknown_prompt(storage):
    with pytest.raises(PromptNotFoundError):
        PromptExposure(storage).get_prompt("ghost")


def test_copy_text_uses_clipboard(monkeypatch):
    copied = []
    monkeypatch.setattr(pyperclip, "copy", copied.append)

    copy_text("hello")

    assert copied == ["hello"]


def test_copy_text_reports_missing_clipboard(monkeypatch):
    def unavailable(_text):
        raise pyperclip.PyperclipException("no clipboard mechanism")

    monkeypatch.setattr(pyperclip, "copy", unavailable)
    with pytest.raises(ClipboardError, match="no clipboard mechanism"):
        copy_text("hello")


def test_setup_logging_writes_to_log_directory(tmp_path):
    setup_logging(logging.DEBUG)

    logging.getLogger("pmx.test").info("hello log")

    log_file = tmp_path / "logs" / "pmx.log"
    assert log_file.is_file()
    assert "hello log" in log_file.read_text()


def test_edit_with_undecodable_editor_output(repository, make_script):
    repository.create("p", "Body\n")
    garbler = make_script("garbler", "printf '\\377\\376' > \"$1\"\n")

    with pytest.raises(EditorError, match="non UTF-8"):
        ProfileEditor(repository, environ={"EDITOR": str(garbler)}).edit("p")
    assert repository.read("p") == "Body\n"
