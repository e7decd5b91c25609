import logging

from facescan.orchestrator.contracts import Patient
from facescan.orchestrator.errors import ScorerError

from conftest import PROBE, face, patient


def test_empty_roster_is_no_match_without_scorer_calls(policy, scorer):
    verdict = policy.select(PROBE, [])
    assert not verdict.matched
    assert verdict.patient is None
    assert scorer.calls == []


def test_high_confidence_short_circuits(policy, scorer):
    a, b, c = patient("a"), patient("b"), patient("c")
    scorer.scores = {face("a"): 40, face("b"): 96, face("c"): 99}

    verdict = policy.select(PROBE, [a, b, c])

    assert verdict.matched
    assert verdict.patient == b
    assert verdict.stage == "high_confidence"
    assert scorer.scored() == [face("a"), face("b")]
    assert scorer.confirmed() == []


def test_high_threshold_is_inclusive(policy, scorer):
    a = patient("a")
    scorer.scores = {face("a"): 95}
    verdict = policy.select(PROBE, [a])
    assert verdict.patient == a
    assert verdict.stage == "high_confidence"
    assert scorer.confirmed() == []


def test_all_below_minimum_never_confirms(policy, scorer):
    scorer.scores = {face("a"): 74.9, face("b"): 10}
    verdict = policy.select(PROBE, [patient("a"), patient("b")])
    assert not verdict.matched
    assert scorer.confirmed() == []


def test_single_plausible_candidate_confirmed(policy, scorer):
    a = patient("a")
    scorer.scores = {face("a"): 80}
    scorer.confirmations = {face("a"): True}

    verdict = policy.select(PROBE, [a])

    assert verdict.patient == a
    assert verdict.score == 80
    assert verdict.stage == "confirmed"
    assert scorer.confirmed() == [face("a")]


def test_single_plausible_candidate_rejected(policy, scorer):
    scorer.scores = {face("a"): 80}
    scorer.confirmations = {face("a"): False}
    verdict = policy.select(PROBE, [patient("a")])
    assert not verdict.matched
    assert scorer.confirmed() == [face("a")]


def test_minimum_threshold_is_inclusive(policy, scorer):
    scorer.scores = {face("a"): 75}
    scorer.confirmations = {face("a"): True}
    verdict = policy.select(PROBE, [patient("a")])
    assert verdict.matched


def test_best_candidate_is_the_one_confirmed(policy, scorer):
    a, b = patient("a"), patient("b")
    scorer.scores = {face("a"): 80, face("b"): 85}
    scorer.confirmations = {face("a"): True, face("b"): True}

    verdict = policy.select(PROBE, [a, b])

    assert verdict.patient == b
    assert scorer.confirmed() == [face("b")]


def test_ties_keep_earliest_candidate(policy, scorer):
    a, b = patient("a"), patient("b")
    scorer.scores = {face("a"): 82, face("b"): 82}
    scorer.confirmations = {face("a"): True, face("b"): True}

    verdict = policy.select(PROBE, [a, b])

    assert verdict.patient == a
    assert scorer.confirmed() == [face("a")]


def test_scorer_failure_does_not_stop_evaluation(policy, scorer, caplog):
    a, b = patient("a"), patient("b")
    scorer.scores = {face("a"): ScorerError("timeout"), face("b"): 97}
    caplog.set_level(logging.ERROR, logger="facescan")

    verdict = policy.select(PROBE, [a, b])

    assert verdict.patient == b
    assert scorer.scored() == [face("a"), face("b")]
    assert any("error scoring a" in rec.message for rec in caplog.records)


def test_unexpected_scorer_exception_is_absorbed_too(policy, scorer):
    scorer.scores = {face("a"): RuntimeError("boom"), face("b"): 20}
    verdict = policy.select(PROBE, [patient("a"), patient("b")])
    assert not verdict.matched
    assert len(scorer.scored()) == 2


def test_confirmation_failure_means_no_match(policy, scorer):
    scorer.scores = {face("a"): 90}
    scorer.confirmations = {face("a"): ScorerError("503")}
    verdict = policy.select(PROBE, [patient("a")])
    assert not verdict.matched
    assert scorer.confirmed() == [face("a")]


def test_candidates_without_usable_face_are_never_scored(policy, scorer):
    no_photo = patient("x", with_face=False)
    broken = Patient(id="y", name="Broken", face_image="data:text/plain;base64,aGk=")
    scorer.default_score = 100

    verdict = policy.select(PROBE, [no_photo, broken])

    assert not verdict.matched
    assert scorer.calls == []


def test_failed_best_candidate_cannot_win(policy, scorer):
    # "a" would have scored highest but its call fails; "b" is confirmed instead
    a, b = patient("a"), patient("b")
    scorer.scores = {face("a"): ScorerError("boom"), face("b"): 78}
    scorer.confirmations = {face("b"): True}
    verdict = policy.select(PROBE, [a, b])
    assert verdict.patient == b


def test_candidates_scored_in_input_order(policy, scorer):
    roster = [patient(pid) for pid in "dcba"]
    policy.select(PROBE, roster)
    assert scorer.scored() == [face(pid) for pid in "dcba"]
