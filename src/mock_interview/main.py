#!/usr/bin/env python
"""
Mock Interview - Command Line Entry Point

Runs a mock interview in the terminal against the same session engine the
API uses. For API-based interviews, start the FastAPI server instead:
    python -m mock_interview.main serve
    # or: uvicorn mock_interview.api.main:app --reload
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from mock_interview.config import ENGINE_CONFIG, LLM_CONFIG
from mock_interview.engine.controller import SessionLifecycleController
from mock_interview.engine.models import Report
from mock_interview.logging_config import configure_logging


def print_report(report: Report) -> None:
    print("\n📊 Interview Evaluation")
    print("=" * 60)
    print(f"Overall score: {report.overall_score:.1f}/100")
    for category in report.category_scores:
        print(f"   • {category.category}: {category.score:.1f} ({category.question_count} questions)")

    print(f"\n{report.overall_feedback}")
    if report.strengths:
        print("\n✅ Strengths:")
        for item in report.strengths:
            print(f"   • {item}")
    if report.improvements:
        print("\n🔧 Improvements:")
        for item in report.improvements:
            print(f"   • {item}")


async def run_interview(
    controller: SessionLifecycleController,
    resume_text: str,
    question_count: int,
    output_dir: Optional[Path] = None,
) -> Report:
    """
    Conduct an interview in the terminal.

    Args:
        controller: Session engine to drive
        resume_text: Candidate résumé text
        question_count: Number of questions to ask
        output_dir: Where to save the report JSON (skipped if None)

    Returns:
        The final evaluation report
    """
    print("🚀 Preparing interview session...")
    session = await controller.create_session(
        resume_text, question_count, timeout=LLM_CONFIG["generation_timeout"]
    )
    print(f"📋 Session ID: {session.session_id}")

    slot = controller.get_current_question(session.session_id)
    while slot is not None:
        print(f"\n[QUESTION {slot.index + 1}/{session.total_questions} - {slot.category}]")
        print(slot.question)
        answer = ""
        while not answer.strip():
            answer = input("\nYour answer: ")
        result = controller.submit_answer(session.session_id, slot.index, answer)
        slot = result.next_question

    print("\n🔍 Evaluating interview...")
    report = await controller.generate_report(
        session.session_id, timeout=LLM_CONFIG["evaluation_timeout"]
    )
    print_report(report)

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        report_file = output_dir / f"{session.session_id}_report.json"
        report_file.write_text(
            json.dumps(report.model_dump(mode="json"), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        print(f"\n💾 Report saved to: {report_file}")

    return report


def kickoff(resume_path: str, question_count: Optional[int] = None):
    """Run an interactive interview for the résumé at resume_path."""
    from mock_interview.api.service import build_controller

    resume_text = Path(resume_path).read_text(encoding="utf-8")
    controller = build_controller()
    try:
        asyncio.run(run_interview(
            controller,
            resume_text,
            question_count or ENGINE_CONFIG["default_question_count"],
            output_dir=Path("interview_results"),
        ))
    finally:
        controller.dispatcher.shutdown()


def serve(host: Optional[str] = None, port: Optional[int] = None):
    """
    Start the FastAPI server for API-based interviews.
    """
    from mock_interview.api.main import run_server
    from mock_interview.config import API_CONFIG
    run_server(host=host or API_CONFIG["host"], port=port or API_CONFIG["port"], reload=False)


def main():
    configure_logging()
    if len(sys.argv) > 1 and sys.argv[1] == "serve":
        serve()
    elif len(sys.argv) > 1:
        count = int(sys.argv[2]) if len(sys.argv) > 2 else None
        kickoff(sys.argv[1], count)
    else:
        print("Usage: mock-interview <resume.txt> [question_count] | mock-interview serve")
        sys.exit(1)


if __name__ == "__main__":
    main()
