#!/usr/bin/env python3
"""
Complete Pipeline Demo: Survey → CSV → Store → Survey → Results

Shows the full workflow against an in-memory store:
1. Create a survey
2. Submit responses
3. Show the CSV files as committed
4. Reload and tabulate results

Set GITHUB_OWNER / GITHUB_REPO / GITHUB_TOKEN (or a .env file) and pass
--github to run against a real repository instead.
"""

import logging
import sys

from quicksurvey.config import load_config
from quicksurvey.examples import build_example_feedback_survey
from quicksurvey.repository import SurveyRepository
from quicksurvey.results import tabulate_results
from quicksurvey.service import SurveyService
from quicksurvey.store import GitHubContentStore, InMemoryStore


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    if "--github" in sys.argv:
        store = GitHubContentStore(load_config())
    else:
        store = InMemoryStore()

    with store:
        repository = SurveyRepository(store)
        service = SurveyService(repository)

        print("=" * 80)
        print("COMPLETE PIPELINE DEMO: Survey → CSV → Store → Results")
        print("=" * 80)

        # =====================================================================
        # STEP 1: Create survey
        # =====================================================================
        print("\n1. CREATING SURVEY...")
        template = build_example_feedback_survey(with_responses=False)
        survey = service.create_survey(template.title, template.description, template.questions)
        print(f"   ✓ Survey id: {survey.id}")
        print(f"   ✓ Questions: {len(survey.questions)}")

        # =====================================================================
        # STEP 2: Submit responses
        # =====================================================================
        print("\n2. SUBMITTING RESPONSES...")
        service.submit_response(survey.id, {"q1": "Ada", "q2": "Great", "q3": ["Keynote", "Dinner"]})
        service.submit_response(survey.id, {"q1": "Grace", "q2": "Poor, really", "q4": 'Too "long"'})
        print("   ✓ 2 responses recorded")

        # =====================================================================
        # STEP 3: Show stored files
        # =====================================================================
        print("\n3. STORED FILES...")
        for path in (repository.metadata_path(survey.id), repository.responses_path(survey.id)):
            stored = store.read(path)
            print(f"\n--- {path} @ {stored.revision[:8]}")
            print(stored.content)

        # =====================================================================
        # STEP 4: Results
        # =====================================================================
        print("\n4. RESULTS...")
        results = tabulate_results(repository.load(survey.id))
        for summary in results.questions:
            print(f"\n   {summary.question_text}")
            for entry in summary.counts:
                print(f"      {entry.option}: {entry.count} ({entry.percent:.0f}%)")
            for text in summary.texts:
                print(f"      - {text}")

    print("\n" + "=" * 80)
    print("✓ DEMO COMPLETE")
    print("=" * 80)


if __name__ == "__main__":
    main()
