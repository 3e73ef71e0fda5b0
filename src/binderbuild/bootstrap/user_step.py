"""User step: create the non-root notebook user and hand it the install root."""

from __future__ import annotations

import pwd

from binderbuild.core.schema import BuildContext, StepResult
from binderbuild.utils import get_runner_and_settings


def user_exists(name: str) -> bool:
    try:
        pwd.getpwnam(name)
    except KeyError:
        return False
    return True


class UserStep:
    """Create a group and user sharing one id, then chown the install root to them."""

    name = "user"
    trigger: str | None = None

    def execute(self, context: BuildContext) -> StepResult:
        runner, settings, err = get_runner_and_settings(context, self.name)
        if err:
            return err
        env_cfg = settings.environment
        user, uid = env_cfg.nb_user, str(env_cfg.nb_uid)
        runner.run(["groupadd", "--gid", uid, user])
        runner.run(["useradd", "--create-home", "--gid", uid, "--no-log-init", "--uid", uid, user])
        runner.run(["chown", "-R", f"{user}:{user}", settings.paths.srv_dir])
        return StepResult(step_name=self.name, message=f"Created user {user} (uid {uid})")

    def can_skip(self, context: BuildContext) -> bool:
        settings = context.config.get("settings")
        if settings is None or context.config.get("runner") is None:
            return False
        if context.config["runner"].dry_run:
            return False
        return user_exists(settings.environment.nb_user)
