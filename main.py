import argparse
import logging
import os
import sys

from coursematch.data import sample_dataset
from coursematch.generate import SEED_DEFAULT, generate_dataset
from coursematch.io_utils import (
    DEFAULT_EXPORT_FILENAME, load_dataset_dir, save_assignments_csv,
    save_dataset_json, save_room_assignments_csv,
)
from coursematch.scheduling.evaluation import analyze_dataset, summary
from coursematch.scheduling.matcher import LOAD_MODES, perform_matching
from coursematch.scheduling.validation import validate_dataset

logger = logging.getLogger("coursematch")


def main(argv=None):
    p = argparse.ArgumentParser(description="Course Matcher – preference-order student/course matching")
    # Input modes (default: built-in sample data)
    p.add_argument('--data', type=str, help='Directory with lecturers.csv, rooms.csv, courses.csv, requests.csv')
    p.add_argument('--generate', type=int, default=None, help='Generate a synthetic dataset with N requests')
    p.add_argument('--seed', type=int, default=SEED_DEFAULT)

    # Matching
    p.add_argument('--load-mode', type=str, default='course', choices=LOAD_MODES,
                   help='course: one load unit per distinct course | student: one per enrolled student')
    p.add_argument('--validate-only', action='store_true', help='Validate and analyze, do not match')

    # Output
    p.add_argument('--out-dir', type=str, default='.')
    p.add_argument('--json', type=str, default=DEFAULT_EXPORT_FILENAME, help='Dataset + analysis export file name')
    p.add_argument('-v', '--verbose', action='store_true')
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.data and args.generate is not None:
        raise SystemExit("Use either --data or --generate, not both")
    if args.data:
        try:
            dataset = load_dataset_dir(args.data)
        except (OSError, KeyError, ValueError) as exc:
            raise SystemExit(f"Could not load dataset: {exc}")
    elif args.generate is not None:
        dataset = generate_dataset(n_requests=args.generate, seed=args.seed)
    else:
        dataset = sample_dataset()
    logger.info("Loaded %r", dataset)

    validation = validate_dataset(dataset)
    analysis = analyze_dataset(dataset, validation)
    for issue in validation.errors:
        print(f"ERROR   [{issue.kind} {issue.subject_id}] {issue.message}")
    for issue in validation.warnings:
        print(f"WARNING [{issue.kind} {issue.subject_id}] {issue.message}")
    for line in analysis.insights:
        print(f"- {line}")

    os.makedirs(args.out_dir, exist_ok=True)
    json_path = os.path.join(args.out_dir, args.json)
    save_dataset_json(json_path, dataset, analysis)

    if args.validate_only:
        print(f"Dataset valid: {validation.valid}")
        print(f"Saved: {json_path}")
        return 0 if validation.valid else 1

    results = perform_matching(dataset, load_mode=args.load_mode)
    print(summary(dataset, results, validation))

    assignments_path = os.path.join(args.out_dir, 'assignments.csv')
    rooming_path = os.path.join(args.out_dir, 'rooming.csv')
    save_assignments_csv(assignments_path, results)
    save_room_assignments_csv(rooming_path, results)
    print(f"Saved: {assignments_path}, {rooming_path}, {json_path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
