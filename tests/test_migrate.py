"""Tests for legacy cleanup, selective uninstall and teardown."""

import json

from devflow.hooks import add_ambient_hook, add_memory_hooks
from devflow.migrate import (
    AssetsToRemove,
    agents_dir,
    clean_settings,
    command_file,
    commands_dir,
    compute_assets_to_remove,
    ensure_gone,
    full_teardown,
    is_devflow_installed,
    remove_legacy_commands,
    remove_legacy_skills,
    remove_plugin_assets,
    skill_dir,
    strip_devflow_settings,
)
from devflow.plugins import DEVFLOW_PLUGINS, get_plugin
from devflow.settings import apply_teams_config


def touch(path, text=""):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestEnsureGone:
    def test_file_dir_and_missing(self, tmp_path):
        f = touch(tmp_path / "a.md")
        d = tmp_path / "skill"
        touch(d / "SKILL.md")
        assert ensure_gone(f)
        assert ensure_gone(d)
        assert not ensure_gone(tmp_path / "missing")
        assert not f.exists() and not d.exists()

    def test_symlink_is_unlinked_not_followed(self, tmp_path):
        target = tmp_path / "real"
        touch(target / "keep.md")
        link = tmp_path / "link"
        link.symlink_to(target, target_is_directory=True)
        assert ensure_gone(link)
        assert (target / "keep.md").exists()


class TestLegacyCleanup:
    def test_removes_legacy_command(self, tmp_path):
        legacy = touch(command_file(tmp_path, "review"))
        current = touch(command_file(tmp_path, "code-review"))
        result = remove_legacy_commands(tmp_path)
        assert result.removed == [legacy]
        assert not legacy.exists()
        assert current.exists()

    def test_legacy_skills_and_nested_layout(self, tmp_path):
        touch(skill_dir(tmp_path, "devflow-core-patterns") / "SKILL.md")
        touch(skill_dir(tmp_path, "commit") / "SKILL.md")
        touch(tmp_path / "skills" / "devflow" / "old" / "SKILL.md")
        keep = touch(skill_dir(tmp_path, "core-patterns") / "SKILL.md")
        user_skill = touch(skill_dir(tmp_path, "my-skill") / "SKILL.md")

        result = remove_legacy_skills(tmp_path)

        assert result.ok
        assert len(result.removed) == 3
        assert keep.exists() and user_skill.exists()

    def test_cleanup_when_nothing_to_do(self, tmp_path):
        result = remove_legacy_commands(tmp_path)
        assert result.ok and result.removed == []


class TestComputeAssetsToRemove:
    def test_shared_assets_are_retained(self):
        assets = compute_assets_to_remove([get_plugin("devflow-code-review")], DEVFLOW_PLUGINS)
        assert assets.commands == ["/code-review"]
        assert "reviewer" in assets.agents
        assert "git" not in assets.agents
        assert "review-methodology" in assets.skills
        assert "accessibility" not in assets.skills

    def test_removing_last_owner_removes_asset(self):
        installed = [get_plugin("devflow-core-skills"), get_plugin("devflow-debug")]
        assets = compute_assets_to_remove([get_plugin("devflow-debug")], installed)
        assert assets.agents == ["git"]
        assert assets.skills == ["agent-teams"]

    def test_nothing_selected(self):
        assert compute_assets_to_remove([], DEVFLOW_PLUGINS) == AssetsToRemove()


class TestRemovePluginAssets:
    def test_removes_only_listed(self, tmp_path):
        cmd = touch(command_file(tmp_path, "debug"))
        other_cmd = touch(command_file(tmp_path, "implement"))
        agent = touch(agents_dir(tmp_path) / "git.md")
        skill = touch(skill_dir(tmp_path, "agent-teams") / "SKILL.md").parent

        result = remove_plugin_assets(
            tmp_path, AssetsToRemove(commands=["/debug"], agents=["git"], skills=["agent-teams", "ghost"])
        )

        assert set(result.removed) == {cmd, agent, skill}
        assert other_cmd.exists()
        assert result.ok


class TestSettingsCleanup:
    def test_strip_keeps_user_keys(self, tmp_path):
        settings = add_ambient_hook(add_memory_hooks({"model": "opus"}, tmp_path), tmp_path)
        settings = apply_teams_config(settings)
        settings["statusLine"] = {"type": "command", "command": f"{tmp_path}/scripts/statusline.sh"}
        assert strip_devflow_settings(settings) == {"model": "opus"}

    def test_foreign_status_line_is_kept(self):
        settings = {"statusLine": {"type": "command", "command": "~/bin/my-status"}}
        assert strip_devflow_settings(settings) == settings

    def test_clean_settings_deletes_empty_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps(add_memory_hooks({}, tmp_path)))
        assert clean_settings(tmp_path)
        assert not path.exists()

    def test_clean_settings_rewrites_remaining(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps(add_memory_hooks({"model": "opus"}, tmp_path)))
        assert clean_settings(tmp_path)
        assert json.loads(path.read_text()) == {"model": "opus"}

    def test_clean_settings_untouched(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text('{"model":"opus"}')
        assert not clean_settings(tmp_path)
        assert path.read_text() == '{"model":"opus"}'
        assert not clean_settings(tmp_path / "missing")

    def test_clean_settings_with_null_hook_list(self, tmp_path):
        path = tmp_path / "settings.json"
        settings = add_memory_hooks({"model": "opus"}, tmp_path)
        settings["hooks"]["Stop"].append({"hooks": None})
        path.write_text(json.dumps(settings))
        assert clean_settings(tmp_path)
        assert json.loads(path.read_text()) == {"model": "opus", "hooks": {"Stop": [{"hooks": None}]}}


class TestFullTeardown:
    def test_removes_everything_devflow_owns(self, tmp_path):
        claude = tmp_path / ".claude"
        devflow = tmp_path / ".devflow"
        touch(command_file(claude, "implement"))
        touch(agents_dir(claude) / "coder.md")
        touch(skill_dir(claude, "git-safety") / "SKILL.md")
        touch(skill_dir(claude, "devflow-commit") / "SKILL.md")
        touch(devflow / "scripts" / "statusline.sh")
        user_skill = touch(skill_dir(claude, "mine") / "SKILL.md")
        user_command = touch(claude / "commands" / "mine.md")
        (claude / "settings.json").write_text(json.dumps(add_memory_hooks({"model": "opus"}, devflow)))

        result = full_teardown(claude, devflow)

        assert result.ok
        assert not is_devflow_installed(claude)
        assert not commands_dir(claude).exists()
        assert not skill_dir(claude, "git-safety").exists()
        assert not skill_dir(claude, "devflow-commit").exists()
        assert not devflow.exists()
        assert user_skill.exists() and user_command.exists()
        assert json.loads((claude / "settings.json").read_text()) == {"model": "opus"}

    def test_keep_settings(self, tmp_path):
        claude = tmp_path / ".claude"
        touch(command_file(claude, "implement"))
        settings = json.dumps(add_memory_hooks({}, tmp_path))
        (claude / "settings.json").write_text(settings)
        full_teardown(claude, tmp_path / ".devflow", keep_settings=True)
        assert (claude / "settings.json").read_text() == settings

    def test_idempotent(self, tmp_path):
        claude = tmp_path / ".claude"
        full_teardown(claude, tmp_path / ".devflow")
        result = full_teardown(claude, tmp_path / ".devflow")
        assert result.ok and result.removed == []
