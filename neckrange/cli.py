"""
Command line entry point: diagnose neck mobility from three still images.

    neckrange neutral.jpg right.jpg left.jpg --pose-model pose_landmarker_heavy.task

Prints the diagnosis as JSON on stdout. A rejected capture prints a JSON error
body naming the capture and exits with status 2; invalid configuration or
unreadable files exit with status 1.
"""

import argparse
import dataclasses
import json
import logging
import sys
from typing import Dict, List, Optional

from .analyzer import NeckRangeAnalyzer
from .config import NeckRangeConfig
from .landmarks import CaptureType
from .logging_config import setup_logging
from .messages import SUPPORTED_LANGUAGES
from .session import DiagnosisSession

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CAPTURE_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='neckrange',
        description='Measure lateral neck flexion from neutral, right-tilt and left-tilt photos.'
    )
    parser.add_argument('neutral', help='Image with the head upright')
    parser.add_argument('right', help='Image with the head tilted to the right')
    parser.add_argument('left', help='Image with the head tilted to the left')
    parser.add_argument('--pose-model', help='Path to a pose_landmarker .task model')
    parser.add_argument('--face-model', help='Path to a face_landmarker .task model (optional)')
    parser.add_argument('--lang', choices=list(SUPPORTED_LANGUAGES), help='Message language')
    parser.add_argument('--env-file', help='.env file to load settings from')
    return parser


def _print_json(body: Dict) -> None:
    print(json.dumps(body, ensure_ascii=False, indent=2))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = NeckRangeConfig.from_env(dotenv_path=args.env_file)
        overrides = {}
        if args.pose_model:
            overrides['pose_model_path'] = args.pose_model
        if args.face_model:
            overrides['face_model_path'] = args.face_model
        if args.lang:
            overrides['language'] = args.lang
        config = dataclasses.replace(config, **overrides)
        setup_logging(config.log_level)
    except ValueError as e:
        _print_json({'message': 'Invalid configuration', 'error': str(e)})
        return EXIT_ERROR

    # Imported here so that mediapipe is only loaded when images are analyzed
    from .pose_detector import PoseDetector, load_image

    images = {
        CaptureType.NEUTRAL: args.neutral,
        CaptureType.RIGHT_TILT: args.right,
        CaptureType.LEFT_TILT: args.left,
    }

    analyzer = NeckRangeAnalyzer.from_config(config)
    session = DiagnosisSession(language=config.language)

    try:
        with PoseDetector.from_config(config) as detector:
            for capture_type, image_path in images.items():
                logger.info(f"Analyzing {capture_type.value} capture: {image_path}")
                landmarks = detector.detect(load_image(image_path))
                result = analyzer.analyze(capture_type, landmarks)
                if not result.is_valid:
                    body = result.to_dict()
                    body['image'] = image_path
                    _print_json(body)
                    return EXIT_CAPTURE_FAILED
                session.record_measurement(capture_type, result.measurement)
    except ValueError as e:
        logger.error(f"Error processing captures: {e}")
        _print_json({'message': 'Error processing captures', 'error': str(e)})
        return EXIT_ERROR

    _print_json(session.compute_diagnosis().to_dict())
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
