import pytest

from resume_hub.models.models import DocumentRecord, JobRecord, ParsedFields
from resume_hub.services.matching import (
    MAX_EVIDENCE,
    find_evidence,
    match_candidates,
    match_requirements,
    match_skills,
    score_candidate,
    skill_ratio,
)


def make_candidate(cid, skills, text, name=None, email=None):
    return DocumentRecord(
        id=cid,
        owner_id=f"user-{cid}",
        text=text,
        fields=ParsedFields(name=name, email=email, skills=skills),
    )


@pytest.fixture
def job():
    return JobRecord(
        id="job-1",
        title="Full Stack Engineer",
        description="Build backend services and web frontends",
        skills=["Python", "React"],
        requirements=["5 years experience"],
    )


@pytest.fixture
def candidates():
    return [
        make_candidate(
            "a", ["Python", "Django"],
            "Jane Doe. 5 years experience in backend roles. Wrote Python services daily.",
            name="Jane Doe", email="jane@example.com",
        ),
        make_candidate(
            "b", ["React", "Node"],
            "John Roe. Frontend developer. Shipped React dashboards.",
            name="John Roe",
        ),
    ]


class TestSkillAndRequirementMatching:
    """Bidirectional skill containment and requirement lookup"""

    def test_match_skills_partial_overlap(self):
        matched, missing = match_skills(["Python", "React"], ["python", "Django"])
        assert matched == ["Python"]
        assert missing == ["React"]

    def test_match_skills_substring_both_ways(self):
        matched, _ = match_skills(["Node", "Vue.js"], ["Node.js", "Vue"])
        assert matched == ["Node", "Vue.js"]

    def test_empty_job_skill_never_matches(self):
        matched, missing = match_skills([""], ["Python"])
        assert matched == []
        assert missing == [""]

    def test_match_requirements(self):
        matched, missing = match_requirements(
            ["5 years experience", "Kubernetes"], "Has 5 YEARS EXPERIENCE in backend roles"
        )
        assert matched == ["5 years experience"]
        assert missing == ["Kubernetes"]

    def test_skill_ratio(self):
        assert skill_ratio(1, 2) == 0.5
        assert skill_ratio(0, 0) == 1.0


class TestEvidence:
    """Evidence sentences for matched skills"""

    def test_first_sentence_per_skill(self):
        text = "Used Python at work. Python again here. Built React apps."
        assert find_evidence(["Python", "React"], text) == ["Used Python at work", "Built React apps."]

    def test_deduplicated_and_capped(self):
        text = "Python, React, Go, Rust and SQL all in one line. Then some Rust. And SQL."
        evidence = find_evidence(["Python", "React", "Go", "Rust", "SQL"], text)
        assert len(evidence) <= MAX_EVIDENCE
        assert evidence[0] == "Python, React, Go, Rust and SQL all in one line"
        assert len(set(evidence)) == len(evidence)


class TestMatchCandidates:
    """End-to-end ranking"""

    def test_skill_breakdown_per_candidate(self, job, candidates):
        results = {r.candidate_id: r for r in match_candidates(job, candidates)}

        a = results["a"]
        assert a.matched_skills == ["Python"]
        assert a.missing_skills == ["React"]
        assert a.matched_requirements == ["5 years experience"]
        assert a.missing_requirements == []
        assert a.candidate_name == "Jane Doe"
        assert a.email == "jane@example.com"

        b = results["b"]
        assert b.matched_skills == ["React"]
        assert b.missing_skills == ["Python"]
        assert b.matched_requirements == []
        assert b.missing_requirements == ["5 years experience"]

    def test_scores_in_range_and_sorted(self, job, candidates):
        results = match_candidates(job, candidates)
        assert len(results) == 2
        for r in results:
            assert 0.0 <= r.score <= 1.0
        assert results[0].score >= results[1].score

    def test_empty_candidates(self, job):
        assert match_candidates(job, []) == []

    def test_ties_break_on_candidate_id(self, job):
        text = "Python and React developer."
        cands = [
            make_candidate("zeta", ["Python", "React"], text),
            make_candidate("alpha", ["Python", "React"], text),
            make_candidate("mid", ["Python", "React"], text),
        ]
        results = match_candidates(job, cands)
        assert [r.candidate_id for r in results] == ["alpha", "mid", "zeta"]

    def test_job_without_skills_gives_full_skill_credit(self):
        job = JobRecord(id="j", title="Anything", description="")
        cand = make_candidate("c", [], "unrelated words entirely")
        result = score_candidate(job, cand)
        # no shared tokens, so the score is the skill half only
        assert result.score == pytest.approx(0.5)
        assert result.matched_skills == []
        assert result.missing_skills == []

    def test_top_n_is_clamped(self, job):
        cands = [make_candidate(f"c{i:02d}", ["Python"], "Python developer.") for i in range(60)]
        assert len(match_candidates(job, cands, top_n=3)) == 3
        assert len(match_candidates(job, cands, top_n=0)) == 1
        assert len(match_candidates(job, cands, top_n=500)) == 50
        assert len(match_candidates(job, cands, top_n=None)) == 10

    def test_inputs_not_mutated(self, job, candidates):
        before = [c.model_copy(deep=True) for c in candidates]
        match_candidates(job, candidates)
        assert candidates == before
