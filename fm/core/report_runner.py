#!/usr/bin/env python3
"""
Report Runner - Single entry point for every Fishing Master ROM report.

Reports:
  spots     spots.txt                     (US only)
  bait      bait_ratings.txt              (US only, --fix-bait-bug for stride 7)
  averages  winning_averages_<variant>.txt

Each report is rendered fully in memory before its file is written, so a
report that fails leaves no partial file behind.

Usage:
    from fm.core.report_runner import ReportRunner

    runner = ReportRunner(RomImage.load("/path/to/roms"), "out")
    runner.run_default()

CLI:
    python -m fm.core.report_runner --rom-dir /path/to/roms -o out
"""

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from fm.core.bait_ratings import BaitRatingReader, StrideMode, format_bait_ratings
from fm.core.config import DEFAULT_CONFIG, DecodeConfig, get_rom_base_path
from fm.core.errors import RomDecodeError
from fm.core.rom_image import RomImage, Variant
from fm.core.rotation_scoring import RotationScorer, format_winning_averages
from fm.core.spot_decoder import SpotDecoder, format_spots

logger = logging.getLogger(__name__)

REPORTS = ("spots", "bait", "averages")

# Mirrors what the game data supports today
DEFAULT_PLAN: Tuple[Tuple[Variant, str], ...] = (
    (Variant.US, "spots"),
    (Variant.US, "bait"),
    (Variant.US, "averages"),
    (Variant.JP, "averages"),
)


@dataclass
class ReportOutput:
    report: str
    variant: Variant
    path: Path
    text: str
    data: Any = None


class ReportRunner:
    """Renders reports from a loaded RomImage into output_dir."""

    def __init__(
        self,
        image: RomImage,
        output_dir: Union[str, Path] = ".",
        stride_mode: StrideMode = StrideMode.BUGGY,
        write_json: bool = False,
        config: DecodeConfig = DEFAULT_CONFIG,
    ):
        self.image = image
        self.output_dir = Path(output_dir)
        self.stride_mode = stride_mode
        self.write_json = write_json
        self.config = config

    # ----- renderers, no file I/O -----

    def render_spots(self) -> ReportOutput:
        areas = SpotDecoder(self.image, self.config).decode()
        return ReportOutput(
            report="spots",
            variant=self.image.variant,
            path=self.output_dir / "spots.txt",
            text=format_spots(areas),
            data=[a.to_dict() for a in areas],
        )

    def render_bait(self) -> ReportOutput:
        grid = BaitRatingReader(self.image, self.config).read_grid(self.stride_mode)
        return ReportOutput(
            report="bait",
            variant=self.image.variant,
            path=self.output_dir / "bait_ratings.txt",
            text=format_bait_ratings(grid),
            data={"stride": self.stride_mode.stride, "ratings": grid},
        )

    def render_averages(self) -> ReportOutput:
        averages = RotationScorer(self.config).winning_averages(self.image)
        return ReportOutput(
            report="averages",
            variant=self.image.variant,
            path=self.output_dir / f"winning_averages{self.image.variant.suffix}.txt",
            text=format_winning_averages(averages),
            data=averages.to_dict(),
        )

    def _renderer(self, report: str) -> Callable[[], ReportOutput]:
        renderers = {
            "spots": self.render_spots,
            "bait": self.render_bait,
            "averages": self.render_averages,
        }
        if report not in renderers:
            raise ValueError(f"unknown report {report!r}")
        return renderers[report]

    # ----- file output -----

    def write(self, output: ReportOutput) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        with open(output.path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(output.text)
        if self.write_json:
            json_path = output.path.with_suffix('.json')
            with open(json_path, 'w', encoding='utf-8') as f:
                json.dump(output.data, f, indent=2)
        return output.path

    def run(self, variant: Variant, report: str) -> Path:
        """Render one report for variant and write it. Errors propagate, nothing is written."""
        self.image.set_variant(variant)
        output = self._renderer(report)()
        path = self.write(output)
        logger.info("Wrote %s report for %s to %s", report, variant.value, path)
        return path

    def run_plan(self, plan: Sequence[Tuple[Variant, str]],
                 keep_going: bool = False) -> List[Tuple[Variant, str, Exception]]:
        """
        Run each (variant, report) in order.

        Returns:
            Failures as (variant, report, error). Without keep_going the first
            RomDecodeError propagates instead.
        """
        failures = []
        for variant, report in plan:
            try:
                path = self.run(variant, report)
                print(f"Result saved to {path}", file=sys.stderr)
            except RomDecodeError as e:
                if not keep_going:
                    raise
                logger.error("%s report for %s failed: %s", report, variant.value, e)
                failures.append((variant, report, e))
        return failures

    def run_default(self, keep_going: bool = False) -> List[Tuple[Variant, str, Exception]]:
        return self.run_plan(DEFAULT_PLAN, keep_going=keep_going)


def build_plan(variant: Optional[str], reports: Optional[List[str]]) -> List[Tuple[Variant, str]]:
    """
    Plan from CLI choices.

    Without a variant the default plan is used, filtered to `reports`. An
    explicit variant asks for every listed report on it, supported or not.
    """
    if not variant:
        return [(v, r) for v, r in DEFAULT_PLAN if not reports or r in reports]
    variants = list(Variant) if variant == "all" else [Variant.parse(variant)]
    return [(v, r) for v in variants for r in (reports or REPORTS)]


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse

    arg_parser = argparse.ArgumentParser(
        description='Fishing Master ROM reports - spots, bait ratings and winning averages'
    )
    arg_parser.add_argument(
        '--rom-dir',
        help='Directory holding both .sfc images (default: $FM_ROM_PATH or cwd)'
    )
    arg_parser.add_argument(
        '-o', '--output-dir',
        default='.',
        help='Directory for report files (default: cwd)'
    )
    arg_parser.add_argument(
        '--variant',
        choices=['us', 'jp', 'all'],
        help='Restrict reports to one ROM release'
    )
    arg_parser.add_argument(
        '--report',
        action='append',
        choices=REPORTS,
        help='Report to produce; repeatable (default: all supported)'
    )
    arg_parser.add_argument(
        '--fix-bait-bug',
        action='store_true',
        help='Read bait ratings with the corrected 7-byte stride instead of the in-game 6'
    )
    arg_parser.add_argument(
        '--json',
        action='store_true',
        help='Also write a .json file next to each report'
    )
    arg_parser.add_argument(
        '--keep-going',
        action='store_true',
        help='Continue with the next report after one fails'
    )
    arg_parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log progress at INFO level'
    )

    args = arg_parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    try:
        rom_dir = Path(args.rom_dir) if args.rom_dir else get_rom_base_path()
        image = RomImage.load(rom_dir)
    except (RomDecodeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    runner = ReportRunner(
        image,
        args.output_dir,
        stride_mode=StrideMode.CORRECTED if args.fix_bait_bug else StrideMode.BUGGY,
        write_json=args.json,
    )
    plan = build_plan(args.variant, args.report)

    try:
        failures = runner.run_plan(plan, keep_going=args.keep_going)
    except RomDecodeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 1 if failures else 0


if __name__ == '__main__':
    sys.exit(main())
