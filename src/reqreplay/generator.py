"""
reqreplay Script Generator

Renders a RequestBaseline into a standalone replay script.

The generated file is the source of reqreplay.replay_script followed by the
captured baseline and an entry point, so it runs with only requests installed.
"""

import inspect
import logging
import os
from pathlib import Path
from typing import Optional, Union

from . import replay_script
from .config import GeneratorConfig
from .replay_script import RequestBaseline


class ScriptGenerator:
    """
    Generate replay scripts from captured request baselines.

    Example:
        generator = ScriptGenerator()
        baseline = load_baseline('session.json', index=3)
        path = generator.write(baseline, index=3)
    """

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """
        Initialize generator.

        Args:
            config: Optional GeneratorConfig (defaults are used if None)
        """
        self.config = config or GeneratorConfig()

        self.logger = logging.getLogger("reqreplay.generator")
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

        self._script_source = inspect.getsource(replay_script)

    def render_baseline(self, baseline: RequestBaseline) -> str:
        """
        Render the BASELINE assignment for a generated script.

        Every captured value goes through repr() so quotes, backslashes and
        non-UTF-8 body bytes come back unchanged when the script runs.
        """
        lines = [
            "BASELINE = RequestBaseline(",
            f"    host={baseline.host!r},",
            f"    url_path={baseline.url_path!r},",
            f"    method={baseline.method!r},",
            "    headers={",
        ]
        for name, value in baseline.headers.items():
            lines.append(f"        {name!r}: {value!r},")
        lines.extend([
            "    },",
            f"    body={baseline.body!r},",
            f"    scheme={baseline.scheme!r},",
            ")",
        ])
        return "\n".join(lines) + "\n"

    def render(self, baseline: RequestBaseline) -> str:
        """
        Render a complete replay script.

        Args:
            baseline: Captured request values

        Returns:
            Script source text
        """
        header = (
            "#!/usr/bin/env python3\n"
            f"# Replays a captured {baseline.method} request to {baseline.url!r}\n"
            "# Requires: requests\n"
        )
        entry_point = (
            "\n\nif __name__ == '__main__':\n"
            f"    sys.exit(main(BASELINE, prog={self.config.prog_name!r}, "
            f"epilog={self.config.epilog!r}))\n"
        )

        script = (
            header
            + self._script_source.rstrip("\n")
            + "\n\n\n"
            + self.render_baseline(baseline)
            + entry_point
        )

        self.logger.debug(
            f"Rendered script for {baseline.method} {baseline.url} "
            f"({len(baseline.headers)} headers, {len(baseline.body)} body bytes)"
        )
        return script

    def output_path(self, baseline: RequestBaseline, index: int) -> Path:
        """Default output path for the script generated from capture index."""
        return Path(self.config.output_dir) / self.config.output_filename(index, baseline.method)

    def write(
        self,
        baseline: RequestBaseline,
        index: int = 0,
        output_path: Optional[Union[str, Path]] = None
    ) -> Path:
        """
        Render a script and save it to disk.

        Args:
            baseline: Captured request values
            index: Capture index, used in the default filename
            output_path: Explicit output path (overrides config location)

        Returns:
            Path of the written script
        """
        script = self.render(baseline)
        output_file = Path(output_path) if output_path else self.output_path(baseline, index)

        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print(f"❌ Error creating directory {output_file.parent}: {e}", flush=True)
            raise

        try:
            with open(output_file, 'w', encoding='utf-8') as f:
                f.write(script)
            os.chmod(output_file, self.config.file_mode)
        except OSError as e:
            print(f"❌ Error writing to {output_file}: {e}", flush=True)
            raise

        self.logger.info(f"Wrote replay script for {baseline.method} {baseline.url} to {output_file}")
        return output_file
