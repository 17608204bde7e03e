"""Tests for memory and ambient hook registration."""

from pathlib import Path

from devflow.hooks import (
    MEMORY_HOOK_CONFIG,
    add_ambient_hook,
    add_memory_hooks,
    count_memory_hooks,
    has_ambient_hook,
    has_memory_hooks,
    infer_devflow_dir,
    remove_ambient_hook,
    remove_memory_hooks,
)

DEVFLOW_DIR = Path("/home/u/.devflow")


def foreign(command="/usr/local/bin/notify.sh"):
    return {"hooks": [{"type": "command", "command": command}]}


class TestMemoryHooks:
    def test_add_to_empty_settings(self):
        settings = add_memory_hooks({}, DEVFLOW_DIR)
        assert set(settings["hooks"]) == set(MEMORY_HOOK_CONFIG)
        hook = settings["hooks"]["PreCompact"][0]["hooks"][0]
        assert hook == {
            "type": "command",
            "command": str(DEVFLOW_DIR / "scripts" / "hooks" / "pre-compact-memory.sh"),
            "timeout": 10,
        }
        assert count_memory_hooks(settings) == 3
        assert has_memory_hooks(settings)

    def test_add_is_idempotent(self):
        once = add_memory_hooks({}, DEVFLOW_DIR)
        assert add_memory_hooks(once, DEVFLOW_DIR) == once

    def test_add_fills_only_missing(self):
        partial = {"hooks": {"Stop": [foreign(str(DEVFLOW_DIR / "scripts/hooks/stop-update-memory.sh"))]}}
        assert count_memory_hooks(partial) == 1
        updated = add_memory_hooks(partial, DEVFLOW_DIR)
        assert len(updated["hooks"]["Stop"]) == 1
        assert count_memory_hooks(updated) == 3

    def test_remove_keeps_foreign_hooks(self):
        settings = add_memory_hooks({"hooks": {"Stop": [foreign()]}}, DEVFLOW_DIR)
        cleaned = remove_memory_hooks(settings)
        assert cleaned == {"hooks": {"Stop": [foreign()]}}

    def test_remove_prunes_empty_hooks_object(self):
        settings = add_memory_hooks({"model": "opus"}, DEVFLOW_DIR)
        assert remove_memory_hooks(settings) == {"model": "opus"}

    def test_remove_without_hooks_is_noop(self):
        assert remove_memory_hooks({"model": "opus"}) == {"model": "opus"}

    def test_input_is_not_mutated(self):
        original = {"hooks": {"Stop": [foreign()]}}
        add_memory_hooks(original, DEVFLOW_DIR)
        assert original == {"hooks": {"Stop": [foreign()]}}


class TestAmbientHook:
    def test_add_and_detect(self):
        settings = add_ambient_hook({}, DEVFLOW_DIR)
        assert has_ambient_hook(settings)
        hook = settings["hooks"]["UserPromptSubmit"][0]["hooks"][0]
        assert hook["command"].endswith("ambient-prompt.sh")
        assert hook["timeout"] == 5

    def test_add_is_idempotent(self):
        once = add_ambient_hook({}, DEVFLOW_DIR)
        assert add_ambient_hook(once, DEVFLOW_DIR) == once

    def test_remove_keeps_memory_hooks(self):
        settings = add_ambient_hook(add_memory_hooks({}, DEVFLOW_DIR), DEVFLOW_DIR)
        cleaned = remove_ambient_hook(settings)
        assert not has_ambient_hook(cleaned)
        assert has_memory_hooks(cleaned)
        assert "UserPromptSubmit" not in cleaned["hooks"]


class TestInferDevflowDir:
    def test_from_stop_hook(self):
        settings = add_memory_hooks({}, Path("/opt/devflow"))
        assert infer_devflow_dir(settings) == Path("/opt/devflow")

    def test_ignores_foreign_stop_hook(self):
        assert infer_devflow_dir({"hooks": {"Stop": [foreign()]}}) is None

    def test_no_hooks(self):
        assert infer_devflow_dir({}) is None


class TestMalformedSettings:
    SETTINGS = {"hooks": {"Stop": [{"hooks": None}, "junk"], "PreCompact": [{"hooks": {"a": 1}}]}}

    def test_count_ignores_non_list_entries(self):
        assert count_memory_hooks(self.SETTINGS) == 0
        assert not has_memory_hooks(self.SETTINGS)

    def test_remove_leaves_malformed_entries(self):
        assert remove_memory_hooks(self.SETTINGS) == self.SETTINGS

    def test_add_alongside_malformed_entries(self):
        settings = add_memory_hooks(self.SETTINGS, DEVFLOW_DIR)
        assert has_memory_hooks(settings)
        assert settings["hooks"]["Stop"][:2] == [{"hooks": None}, "junk"]

    def test_infer_ignores_malformed_entries(self):
        assert infer_devflow_dir(self.SETTINGS) is None
        assert infer_devflow_dir({"hooks": {"Stop": [{"hooks": [{"command": 42}]}]}}) is None
