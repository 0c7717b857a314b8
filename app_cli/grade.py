from __future__ import annotations
import argparse, logging, sys
from fitness_core.config import load_config
from fitness_core.engine import GradingSession
from fitness_core.errors import GradingError, InputErrors


def ask(prompt: str, options=None) -> str:
    if options:
        print(prompt)
        for i, (value, label) in enumerate(options): print(f"  [{i}] {label}")
        while True:
            v = input("Your choice (index): ").strip()
            if v.isdigit() and int(v) < len(options): return options[int(v)][0]
            print("Enter a number index.")
    else:
        return input(prompt + " ").strip()


def _choices(session: GradingSession, field: str):
    return [(o.value, o.label) for o in session.options(field)]


def run_single(session: GradingSession) -> int:
    gender = ask("Gender:", _choices(session, "gender"))
    grade = ask("Grade:", _choices(session, "grade"))
    test_type = ask("Test:", [(d.test_type, d.title) for d in session.test_definitions()])
    defn = session.definition(test_type)
    while True:
        raw = ask(f"{defn.title} ({defn.description or session.input_hint(defn.input_format)}):")
        outcome = session.validate_input(raw, defn.input_format)
        if outcome.valid: break
        print(outcome.message)
    res = session.grade_single_test(raw, test_type, grade, gender)
    print(f"Final score: {res.final_score}  ({res.tier_message})")
    return 0


def run_composite(session: GradingSession) -> int:
    gender = ask("Gender:", _choices(session, "gender"))
    results: dict[str, str] = {}
    titles = {d.test_type: d for d in session.test_definitions()}
    for w in session.weights():
        if w.weight_percent <= 0 or (w.gender and w.gender != gender.lower()): continue
        d = titles.get(w.test_type)
        label = (d.title if d else w.label or w.test_type) + f" ({w.weight_percent:g}%)"
        while True:
            raw = ask(f"{label}:")
            outcome = session.validate_input(raw, d.input_format if d else "count")
            if outcome.valid: break
            print(outcome.message)
        results[w.test_type] = raw
    try:
        res = session.grade_composite(results, gender)
    except InputErrors as exc:
        for name, err in exc.errors.items(): print(f"{name}: {err.message}")
        return 1
    for name, score in res.per_test.items(): print(f"  {name}: {score}")
    if res.excluded: print(f"  (no score table for: {', '.join(res.excluded)})")
    print(f"Final grade: {res.final_grade}")
    return 0


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Fitness test grader")
    ap.add_argument("--data-dir", default=None)
    ap.add_argument("--composite", action="store_true", help="weighted final grade over all weighted tests")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="[%(levelname)s] %(message)s")
    cfg = load_config()
    if args.data_dir: cfg["DATA_DIR"] = args.data_dir
    session = GradingSession(cfg=cfg)
    print("Fitness Grader")
    try:
        return run_composite(session) if args.composite else run_single(session)
    except GradingError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__": raise SystemExit(main())
