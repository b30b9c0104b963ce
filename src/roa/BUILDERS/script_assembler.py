"""
Builders for the setup, install and run phase scripts.
"""
from ..MODELS.action_layout import ActionLayout
from ..MODELS.script_bundle import PhaseScript, ScriptBundle
from ..UTILS.shell_resolver import ShellChoice

STRICT_MODE = "set -eu;"
NONINTERACTIVE = "export DEBIAN_FRONTEND=noninteractive;"


class ScriptAssembler:
    """
    Assembles the phase scripts. User text is inserted verbatim; making it
    valid shell is the caller's job.
    """
    def __init__(self, layout: ActionLayout):
        """
        Initializes the assembler.

        :param layout: Locations inside the action checkout.
        """
        self.layout = layout

    def assemble(self, shells: ShellChoice, setup: str, install: str, run: str) -> ScriptBundle:
        """
        Builds the three scripts in memory.

        :param shells: Resolved run and install shells.
        :param setup: Setup commands, sourced by the driver as-is.
        :param install: Commands run while building the image.
        :param run: Commands run inside the container.
        :return: The script bundle.
        """
        setup_script = PhaseScript(path=self.layout.setup_script, lines=[setup])

        install_script = PhaseScript(
            path=self.layout.install_script,
            lines=[f"#!{shells.install_shell}", STRICT_MODE, NONINTERACTIVE, install],
        )

        # ci-build.sh goes last; under set -eu it never runs after a failed command
        run_script = PhaseScript(
            path=self.layout.run_script,
            lines=[f"#!{shells.run_shell}", STRICT_MODE, run, str(self.layout.build_driver)],
        )

        return ScriptBundle(setup=setup_script, install=install_script, run=run_script)
