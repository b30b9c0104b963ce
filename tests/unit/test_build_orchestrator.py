# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Unit tests for the build pipeline, with a fake driver.
"""
import os
import stat
import sys
import pytest
from roa.MANAGERS.build_orchestrator import BuildOrchestrator
from roa.MODELS.action_layout import ActionLayout
from roa.MODELS.build_config import BuildConfig
from roa.MODELS.execution_plan import ExecutionResult
from roa.RUNNERS.process_runner import SubprocessExecutor
from roa.errors import ArtifactWriteError, ConfigurationError, ExecutionError, MissingImageDefinitionError, RunOnArchError

BASE_ENV = {
    'PATH': os.environ.get('PATH', '/usr/bin:/bin'),
    'GITHUB_REPOSITORY': 'owner/repo',
    'GITHUB_REF': 'refs/heads/main',
}


class FakeExecutor:
    """Records plans instead of running them."""

    def __init__(self, exit_code=0):
        self.exit_code = exit_code
        self.plans = []

    def execute(self, plan):
        self.plans.append(plan)
        return ExecutionResult(exit_code=self.exit_code)


def make_config(**overrides):
    values = {
        'arch': 'aarch64',
        'distro': 'alpine3.18',
        'base_image': 'arm64v8/alpine:3.18',
        'install': 'apk add make',
        'run': 'make test',
        'rclone_config': '[remote]',
        'deploy_path': 'remote:/repo',
        'repository': 'owner/repo',
        'workflow': 'CI',
    }
    values.update(overrides)
    return BuildConfig(**values)


class TestBuildOrchestrator:
    """Tests for BuildOrchestrator."""

    def test_run_hands_plan_to_executor(self, tmp_path):
        """Test the full pipeline with a custom base image."""
        layout = ActionLayout(root=tmp_path)
        executor = FakeExecutor()
        config = make_config(docker_run_args='--volume "/a b:/build" --privileged', env="FOO: 1\n")
        result = BuildOrchestrator(config, layout, base_env=BASE_ENV, executor=executor).run()

        assert result.succeeded
        plan = executor.plans[0]
        assert plan.driver == layout.entrypoint
        assert plan.image_definition == layout.dockerfile('aarch64', 'alpine3.18')
        assert plan.container_name == 'run-on-arch-owner-repo-ci-aarch64-alpine3-18'
        assert plan.arguments[:3] == ['--volume', '/a b:/build', '--privileged']
        assert plan.arguments[-1] == '-eFOO'
        assert plan.environment['FOO'] == '1'
        assert plan.environment['CI_BRANCH'] == 'main'
        assert plan.command()[:3] == [str(layout.entrypoint), str(plan.image_definition), plan.container_name]

        assert plan.image_definition.read_text().startswith("FROM arm64v8/alpine:3.18")
        assert layout.install_script.read_text().startswith("#!/bin/sh\n")
        assert "make test" in layout.run_script.read_text()

    def test_driver_failure(self, tmp_path):
        """Test that a nonzero driver exit fails the run."""
        orchestrator = BuildOrchestrator(make_config(), ActionLayout(root=tmp_path),
                                         base_env=BASE_ENV, executor=FakeExecutor(exit_code=3))
        with pytest.raises(ExecutionError) as exc:
            orchestrator.run()
        assert exc.value.exit_code == 3

    def test_single_attempt(self, tmp_path):
        """Test that a failing driver is not retried."""
        executor = FakeExecutor(exit_code=1)
        orchestrator = BuildOrchestrator(make_config(), ActionLayout(root=tmp_path),
                                         base_env=BASE_ENV, executor=executor)
        with pytest.raises(ExecutionError):
            orchestrator.run()
        assert len(executor.plans) == 1

    def test_missing_dockerfile_writes_no_scripts(self, tmp_path):
        """Test that a missing shipped Dockerfile aborts before the scripts."""
        layout = ActionLayout(root=tmp_path)
        executor = FakeExecutor()
        orchestrator = BuildOrchestrator(make_config(base_image=None, distro='archlinuxarm'), layout,
                                         base_env=BASE_ENV, executor=executor)
        with pytest.raises(MissingImageDefinitionError) as exc:
            orchestrator.run()
        assert exc.value.path == layout.dockerfile('aarch64', 'archlinuxarm')
        assert not layout.run_script.exists()
        assert executor.plans == []

    @pytest.mark.parametrize("overrides", [
        {'deploy_path': ''},
        {'rclone_config': ''},
        {'env': 'FOO: [1, 2]'},
        {'arch': 'none', 'base_image': None},
        {'docker_run_args': '--label "unterminated'},
    ])
    def test_invalid_configuration_writes_nothing(self, tmp_path, overrides):
        """Test that configuration errors abort before any file is written."""
        executor = FakeExecutor()
        orchestrator = BuildOrchestrator(make_config(**overrides), ActionLayout(root=tmp_path),
                                         base_env=BASE_ENV, executor=executor)
        with pytest.raises(ConfigurationError):
            orchestrator.run()
        assert list(tmp_path.iterdir()) == []
        assert executor.plans == []

    def test_unwritable_artifacts(self, tmp_path):
        """Test that a filesystem failure while writing scripts is reported as a run failure."""
        layout = ActionLayout(root=tmp_path)
        (tmp_path / "src").write_text("not a directory")
        executor = FakeExecutor()
        orchestrator = BuildOrchestrator(make_config(), layout, base_env=BASE_ENV, executor=executor)
        with pytest.raises(ArtifactWriteError) as exc:
            orchestrator.run()
        assert "cannot write build files" in str(exc.value)
        assert executor.plans == []

    def test_linux_only(self, tmp_path, monkeypatch):
        """Test the platform guard."""
        monkeypatch.setattr(sys, 'platform', 'darwin')
        orchestrator = BuildOrchestrator(make_config(), ActionLayout(root=tmp_path), executor=FakeExecutor())
        with pytest.raises(RunOnArchError, match="only Linux"):
            orchestrator.prepare()


class TestSubprocessExecutor:
    """Tests for SubprocessExecutor against a real driver script."""

    def _driver(self, tmp_path, body):
        layout = ActionLayout(root=tmp_path)
        layout.scripts_dir.mkdir(parents=True)
        layout.entrypoint.write_text("#!/bin/sh\n" + body)
        layout.entrypoint.chmod(layout.entrypoint.stat().st_mode | stat.S_IEXEC)
        return layout

    def test_driver_receives_arguments_and_environment(self, tmp_path):
        layout = self._driver(tmp_path, 'echo "$1|$2|$3|$RCLONE_CONF" > "$CI_BUILD_DIR/out.txt"\n')
        base_env = dict(BASE_ENV, GITHUB_WORKSPACE=str(tmp_path))
        config = make_config(docker_run_args='--privileged')
        BuildOrchestrator(config, layout, base_env=base_env, executor=SubprocessExecutor()).run()

        out = (tmp_path / "out.txt").read_text().strip()
        dockerfile, name, first_arg, rclone = out.split("|")
        assert dockerfile == str(layout.dockerfile('aarch64', 'alpine3.18'))
        assert name == 'run-on-arch-owner-repo-ci-aarch64-alpine3-18'
        assert first_arg == '--privileged'
        assert rclone == '[remote]'

    def test_driver_exit_code(self, tmp_path):
        layout = self._driver(tmp_path, "exit 7\n")
        with pytest.raises(ExecutionError) as exc:
            BuildOrchestrator(make_config(), layout, base_env=BASE_ENV).run()
        assert exc.value.exit_code == 7

    def test_missing_driver(self, tmp_path):
        with pytest.raises(ExecutionError, match="failed to start"):
            BuildOrchestrator(make_config(), ActionLayout(root=tmp_path), base_env=BASE_ENV).run()
