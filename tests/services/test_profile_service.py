import pytest

from comradezone.models.profile import Gender, Prompt, ProfileInput, RelationshipGoal
from comradezone.services.profile_service import (
    add_photo,
    browse_profiles,
    compute_completeness,
    delete_photo,
    get_profile,
    get_profile_for_account,
    set_visibility,
    upsert_profile,
)
from comradezone.utils.errors import NotFoundError, ProfileRequiredError, ValidationError


def _input(**overrides):
    data = {
        "display_name": "Ada",
        "age": 22,
        "gender": Gender.FEMALE,
        "seeking_genders": [Gender.MALE],
    }
    data.update(overrides)
    return ProfileInput(**data)


class TestCompleteness:
    def test_minimal_profile(self):
        # name, age, gender and seeking
        assert compute_completeness(_input()) == 40

    def test_short_bio_does_not_count(self):
        assert compute_completeness(_input(bio="hi")) == 40

    def test_full_profile_is_capped(self):
        data = _input(
            bio="Final year law student, debate club captain",
            interests=["debate", "running", "film"],
            course="Law",
            prompts=[Prompt(question="Best book?", answer="Dune"), Prompt(question="Weekend?", answer="Hikes")],
        )

        assert compute_completeness(data) == 95
        assert compute_completeness(data, photo_count=1) == 100
        assert compute_completeness(data.model_copy(update={"relationship_goal": RelationshipGoal.SERIOUS})) == 100

    def test_blank_prompt_answers_are_ignored(self):
        data = _input(prompts=[Prompt(question="Best book?", answer="   ")])

        assert compute_completeness(data) == 40

    @pytest.mark.parametrize("photos,bonus", [(0, 0), (1, 10), (2, 10), (3, 20), (4, 20), (5, 25), (6, 25)])
    def test_photo_bonus_tiers(self, photos, bonus):
        assert compute_completeness(_input(), photo_count=photos) == 40 + bonus


class TestUpsertProfile:
    def test_creates_profile_with_full_quota(self):
        profile = upsert_profile("acc-1", _input(interests=["Chess", " chess ", "Jazz", ""]))

        assert profile.account_id == "acc-1"
        assert profile.super_likes_remaining == 3
        assert profile.show_me is True
        assert profile.seeking_genders == [Gender.MALE]
        assert profile.interests == ["chess", "jazz"]
        assert profile.completeness == 40

    def test_completeness_scores_the_stored_interests(self):
        # Four submitted interests collapse to two after normalization
        profile = upsert_profile("acc-1", _input(interests=["Chess", " chess ", "Jazz", ""]))
        assert profile.completeness == 40

        add_photo(profile.id, "https://cdn.example.com/a.jpg")

        assert get_profile(profile.id).completeness == profile.completeness + 10

    def test_second_call_updates_the_same_profile(self):
        first = upsert_profile("acc-1", _input())
        second = upsert_profile(
            "acc-1",
            _input(display_name="Ada L.", seeking_genders=[Gender.MALE, Gender.NON_BINARY], max_age=40),
        )

        assert second.id == first.id
        assert second.display_name == "Ada L."
        assert second.max_age == 40
        assert sorted(second.seeking_genders) == sorted([Gender.MALE, Gender.NON_BINARY])

    def test_replacing_seeking_genders(self):
        upsert_profile("acc-1", _input(seeking_genders=[Gender.MALE, Gender.FEMALE]))

        profile = upsert_profile("acc-1", _input(seeking_genders=[Gender.NON_BINARY]))

        assert profile.seeking_genders == [Gender.NON_BINARY]

    def test_under_age_is_rejected(self):
        with pytest.raises(ValidationError, match="at least 18"):
            upsert_profile("acc-1", _input(age=17))

        with pytest.raises(ProfileRequiredError):
            get_profile_for_account("acc-1")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"min_age": 16},
            {"min_age": 30, "max_age": 25},
            {"seeking_genders": []},
            {"prompts": [Prompt(question=f"Q{i}", answer="A") for i in range(4)]},
        ],
    )
    def test_invalid_submissions(self, overrides):
        with pytest.raises(ValidationError):
            upsert_profile("acc-1", _input(**overrides))


class TestLookups:
    def test_get_profile(self):
        created = upsert_profile("acc-1", _input())

        assert get_profile(created.id).account_id == "acc-1"
        assert get_profile_for_account("acc-1").id == created.id

    def test_missing_profile(self):
        with pytest.raises(NotFoundError):
            get_profile("ghost")

    def test_account_without_profile(self):
        with pytest.raises(ProfileRequiredError, match="Create a profile first"):
            get_profile_for_account("acc-without-profile")

    def test_set_visibility(self):
        created = upsert_profile("acc-1", _input())

        assert set_visibility(created.id, False).show_me is False
        assert get_profile(created.id).show_me is False
        assert set_visibility(created.id, True).show_me is True


class TestPhotos:
    def test_first_photo_becomes_main(self):
        profile = upsert_profile("acc-1", _input())

        photo = add_photo(profile.id, "https://cdn.example.com/a.jpg")

        assert photo.is_main is True
        stored = get_profile(profile.id)
        assert stored.main_photo_url == "https://cdn.example.com/a.jpg"
        assert stored.completeness == 50

    def test_new_main_photo_replaces_old_one(self):
        profile = upsert_profile("acc-1", _input())
        add_photo(profile.id, "https://cdn.example.com/a.jpg")
        second = add_photo(profile.id, "https://cdn.example.com/b.jpg", is_main=True)

        photos = get_profile(profile.id).photos

        assert [p.is_main for p in photos] == [False, True]
        assert get_profile(profile.id).main_photo_url == second.url

    def test_photo_limit(self):
        profile = upsert_profile("acc-1", _input())
        for i in range(6):
            add_photo(profile.id, f"https://cdn.example.com/{i}.jpg")

        with pytest.raises(ValidationError, match="Maximum 6 photos"):
            add_photo(profile.id, "https://cdn.example.com/7.jpg")

    def test_non_http_url_is_rejected(self):
        profile = upsert_profile("acc-1", _input())

        with pytest.raises(ValidationError):
            add_photo(profile.id, "file:///etc/passwd")

    def test_deleting_main_photo_promotes_the_next(self):
        profile = upsert_profile("acc-1", _input())
        first = add_photo(profile.id, "https://cdn.example.com/a.jpg")
        add_photo(profile.id, "https://cdn.example.com/b.jpg")

        delete_photo(profile.id, first.id)

        photos = get_profile(profile.id).photos
        assert [p.url for p in photos] == ["https://cdn.example.com/b.jpg"]
        assert photos[0].is_main is True
        assert photos[0].sort_order == 0

    def test_cannot_delete_someone_elses_photo(self):
        owner = upsert_profile("acc-1", _input())
        other = upsert_profile("acc-2", _input())
        photo = add_photo(owner.id, "https://cdn.example.com/a.jpg")

        with pytest.raises(NotFoundError):
            delete_photo(other.id, photo.id)


class TestBrowse:
    def test_lists_visible_profiles_only(self):
        visible = upsert_profile("acc-1", _input())
        hidden = upsert_profile("acc-2", _input())
        set_visibility(hidden.id, False)

        assert [p.id for p in browse_profiles()] == [visible.id]

    def test_respects_limit(self):
        for i in range(3):
            upsert_profile(f"acc-{i}", _input())

        assert len(browse_profiles(limit=2)) == 2
