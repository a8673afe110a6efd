"""
EdAiVi Studio Backend: Project Aggregate Tests
==============================================

What:  Child-list mutations on the project documents: duration recompute,
       scene → media cascade, 3D scene/avatar counters, cloning, and the
       owner/collaborator access predicates.
How:   Plain model objects; no store or HTTP involved.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from studio.models import AudioProject, AudioTrack, Avatar3D, MediaElement, Scene, Scene3D, VideoProject
from studio.models.avatar import Animation, Texture
from studio.models.scene3d import Light, Object3D, ObjectMetadata


def track(name: str, start: float, duration: float) -> AudioTrack:
    return AudioTrack(name=name, file_url=f"https://cdn.test/{name}.mp3", start_time=start, duration=duration)


class TestAudioDuration:

    def setup_method(self):
        self.project = AudioProject(owner_id="owner", title="Mix")

    def test_empty_project_has_zero_duration(self):
        assert self.project.calculate_duration() == 0

    def test_duration_is_latest_track_end(self):
        self.project.add_track(track("intro", 0, 12))
        self.project.add_track(track("drop", 30, 5.5))
        self.project.add_track(track("pad", 10, 20))
        assert self.project.duration == pytest.approx(35.5)

    def test_recompute_is_idempotent(self):
        self.project.add_track(track("a", 2, 8))
        first = self.project.calculate_duration()
        assert self.project.calculate_duration() == first == 10

    def test_remove_track_recomputes(self):
        keep = self.project.add_track(track("keep", 0, 4))
        drop = self.project.add_track(track("long", 0, 60))
        assert self.project.remove_track(drop.id) is True
        assert self.project.duration == 4
        assert [t.id for t in self.project.tracks] == [keep.id]

    def test_remove_unknown_track_reports_false(self):
        self.project.add_track(track("a", 0, 1))
        assert self.project.remove_track("missing") is False
        assert len(self.project.tracks) == 1

    def test_update_track_moves_the_end(self):
        added = self.project.add_track(track("a", 0, 10))
        updated = self.project.update_track(added.id, {"start_time": 5})
        assert updated.end_time == 15
        assert self.project.duration == 15

    def test_invalid_track_update_leaves_track_untouched(self):
        added = self.project.add_track(track("a", 0, 10))
        with pytest.raises(PydanticValidationError):
            self.project.update_track(added.id, {"volume": 9})
        assert self.project.get_track(added.id).volume == 1.0

    def test_export_estimates_size_from_quality(self):
        self.project.add_track(track("a", 0, 10))
        exported = self.project.export("https://cdn.test", format="wav", quality="low")
        assert exported.url.startswith(f"https://cdn.test/exports/{self.project.id}_")
        assert exported.url.endswith(".wav")
        assert exported.file_size == 10 * 8000
        assert self.project.status == "completed"
        assert self.project.exported_files == [exported]


class TestVideoScenes:

    def setup_method(self):
        self.project = VideoProject(owner_id="owner", title="Cut")

    def test_removing_a_scene_cascades_to_its_media(self):
        first = self.project.add_scene(Scene(name="one", start_time=0, duration=10))
        second = self.project.add_scene(Scene(name="two", start_time=10, duration=10))
        self.project.add_media_element(MediaElement(type="image", name="a", scene_id=first.id))
        self.project.add_media_element(MediaElement(type="text", name="b", scene_id=first.id))
        kept = self.project.add_media_element(MediaElement(type="video", name="c", scene_id=second.id))
        loose = self.project.add_media_element(MediaElement(type="audio", name="d"))

        removed = self.project.remove_scene(first.id)

        assert {m.name for m in removed} == {"a", "b"}
        assert [m.id for m in self.project.media_elements] == [kept.id, loose.id]
        assert all(m.scene_id != first.id for m in self.project.media_elements)
        assert self.project.duration == 20

    def test_duration_follows_scenes(self):
        only = self.project.add_scene(Scene(name="only", start_time=3, duration=7))
        assert self.project.duration == 10
        self.project.remove_scene(only.id)
        assert self.project.duration == 0

    def test_export_resolution_matches_quality(self):
        self.project.add_scene(Scene(name="s", duration=2))
        exported = self.project.export("https://cdn.test", quality="720p")
        assert (exported.resolution.width, exported.resolution.height) == (1280, 720)
        assert exported.file_size == int(2 * 8000 * 1000 / 8)


class TestScene3D:

    def test_counters_follow_objects_and_lights(self):
        scene = Scene3D(owner_id="owner", name="Room")
        chair = scene.add_object(Object3D(name="chair", metadata=ObjectMetadata(poly_count=100, vertex_count=60)))
        scene.add_object(Object3D(name="table", metadata=ObjectMetadata(poly_count=40, vertex_count=20)))
        light = scene.add_light(Light(name="sun", type="directional"))

        assert scene.metadata.object_count == 2
        assert scene.metadata.total_poly_count == 140
        assert scene.metadata.light_count == 1

        assert scene.remove_object(chair.id) is True
        assert scene.remove_light(light.id) is True
        assert scene.metadata.object_count == 1
        assert scene.metadata.total_poly_count == 40
        assert scene.metadata.total_vertex_count == 20
        assert scene.metadata.light_count == 0

    def test_clone_is_private_and_detached(self):
        scene = Scene3D(owner_id="owner", name="Template", is_public=True, is_template=True)
        scene.add_collaborator("friend", "editor")
        scene.add_object(Object3D(name="tree"))

        clone = scene.clone("someone-else")

        assert clone.id != scene.id
        assert clone.owner_id == "someone-else"
        assert clone.name == "Template (Clone)"
        assert clone.is_public is False and clone.is_template is False
        assert clone.collaborators == []
        assert len(clone.objects) == 1
        clone.objects[0].name = "renamed"
        assert scene.objects[0].name == "tree"


class TestAvatar:

    def test_counts_and_clone(self):
        avatar = Avatar3D(owner_id="owner", name="Bot", model_url="https://cdn.test/bot.glb", is_public=True)
        walk = avatar.add_animation(Animation(name="walk", file_url="https://cdn.test/walk.fbx"))
        avatar.add_texture(Texture(name="skin", file_url="https://cdn.test/skin.png"))
        assert (avatar.metadata.animation_count, avatar.metadata.texture_count) == (1, 1)

        avatar.remove_animation(walk.id)
        assert avatar.metadata.animation_count == 0

        clone = avatar.clone("fan", "My Bot")
        assert clone.name == "My Bot"
        assert clone.owner_id == "fan"
        assert clone.is_public is False


class TestAccessPredicates:

    def setup_method(self):
        self.project = AudioProject(owner_id="owner", title="Shared")
        self.project.add_collaborator("ed", "editor")
        self.project.add_collaborator("vi", "viewer")

    def test_owner_and_editor_can_edit(self):
        assert self.project.can_edit("owner")
        assert self.project.can_edit("ed")
        assert not self.project.can_edit("vi")

    def test_private_project_hidden_from_strangers(self):
        assert self.project.can_view("vi")
        assert not self.project.can_view("stranger")
        self.project.is_public = True
        assert self.project.can_view("stranger")
        assert not self.project.is_member("stranger")

    def test_remove_collaborator_by_user_id(self):
        assert self.project.remove_collaborator("vi") is True
        assert self.project.remove_collaborator("vi") is False
        assert [c.user_id for c in self.project.collaborators] == ["ed"]
