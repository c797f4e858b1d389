"""
JobPrep - CLI Entry Point.

Take a generated test in the terminal, list applications, or run the API.

Usage:
    python main.py serve
    python main.py list --user <user-id>
    python main.py take <application-id> --user <user-id> [--type quiz|coding]
"""

import argparse
import sys

from dotenv import load_dotenv

load_dotenv()

from jobprep.agents import TestGenerator  # noqa: E402
from jobprep.config import setup_logging  # noqa: E402
from jobprep.db.base import init_db, session_scope  # noqa: E402
from jobprep.errors import JobPrepError  # noqa: E402
from jobprep.models import TestType  # noqa: E402
from jobprep.services import lifecycle  # noqa: E402
from jobprep.services.scoring import percentage, performance_label  # noqa: E402


def _print_question(index: int, total: int, question: dict, test_type: TestType):
    print(f"\n[{index}/{total}] ({question.get('difficulty', 'medium')})")
    if test_type == TestType.QUIZ:
        print(question.get("question", ""))
        for option in question.get("options", []):
            print(f"  {option['id']}) {option['text']}")
        return

    print(question.get("title", ""))
    print(question.get("description", ""))
    for example in question.get("examples") or []:
        print(f"  Input: {example['input']}  ->  Output: {example['output']}")
    if question.get("expectedComplexity"):
        print(f"  Expected complexity: {question['expectedComplexity']}")
    print("\nStarter code:")
    print(question.get("starterCode", ""))


def _read_code() -> str:
    """Read a multi-line answer terminated by a line containing only '.'."""
    print("Enter your solution, end with a single '.' line (empty to skip):")
    lines = []
    while True:
        line = input()
        if line.strip() == ".":
            break
        lines.append(line)
    return "\n".join(lines).strip()


def take_test(db, user_id: str, application_id: str, test_type: TestType):
    """Acquire a test, collect answers interactively, then submit."""
    print("Loading test...")
    view = lifecycle.acquire_test(db, user_id, application_id, test_type, TestGenerator())

    if view.is_completed:
        percent = percentage(view.score or 0, view.max_score)
        print(f"Test already completed: {view.score}/{view.max_score} ({percent}%) - {performance_label(percent)}")
        return

    print(f"\n{view.title} - {view.time_limit_minutes} min")
    if view.description:
        print(view.description)
    print("Commands: /skip, /quit")
    print("-" * 40)

    session = lifecycle.TestSession(view)
    questions = view.display_questions()
    for i, question in enumerate(questions, 1):
        _print_question(i, len(questions), question, test_type)
        if test_type == TestType.QUIZ:
            answer = input("Your answer: ").strip()
        else:
            answer = _read_code()

        if answer == "/quit":
            print("Leaving without submitting - answers are not saved.")
            return
        if answer and answer != "/skip":
            session.record_answer(question["id"], answer)

    confirm = input(f"\nSubmit {len(session.answers)}/{len(questions)} answers? (y/n): ").strip().lower()
    if confirm not in ("y", "yes"):
        print("Not submitted.")
        return

    result = session.submit(db, user_id)
    percent = percentage(result.score, result.max_score)
    print(f"\nYour score: {result.score}/{result.max_score} ({percent}%) - {performance_label(percent)}")
    if not result.status_updated:
        print("Warning: score saved but application status could not be updated.")


def list_applications(db, user_id: str):
    applications = lifecycle.list_applications(db, user_id)
    if not applications:
        print("No applications yet.")
        return

    for app in applications:
        print(f"{app.id}  {app.role_title} at {app.company_name}  [{app.status.replace('_', ' ').upper()}]")
        for test in app.tests:
            if test.is_completed:
                print(f"    {test.test_type.value}: {test.score}/{test.max_score}")
            else:
                print(f"    {test.test_type.value}: in progress")


def main():
    """Run the JobPrep CLI."""
    parser = argparse.ArgumentParser(description="JobPrep")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    ls = sub.add_parser("list", help="List applications")
    ls.add_argument("--user", required=True)

    take = sub.add_parser("take", help="Take the test for an application")
    take.add_argument("application_id")
    take.add_argument("--user", required=True)
    take.add_argument("--type", choices=[t.value for t in TestType], default=TestType.QUIZ.value)

    args = parser.parse_args()
    setup_logging()

    if args.command == "serve":
        import uvicorn

        uvicorn.run("jobprep.api.app:app", host=args.host, port=args.port)
        return

    try:
        init_db()
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    with session_scope() as db:
        try:
            if args.command == "list":
                list_applications(db, args.user)
            else:
                take_test(db, args.user, args.application_id, TestType(args.type))
        except JobPrepError as e:
            print(f"Error: {e.message}")
            sys.exit(1)
        except KeyboardInterrupt:
            print("\nGoodbye!")


if __name__ == "__main__":
    main()
