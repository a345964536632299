import re

from slidewright.objects import Audio, AudioOptions, Video, VideoOptions
from slidewright.timing import build_timing


def video(auto_play=True, **kwargs):
    return Video(options=VideoOptions(auto_play=auto_play, **kwargs), rel_id="rId301",
                 media_rel_id="rId501", ext="mp4")


def audio(auto_play=True, **kwargs):
    return Audio(options=AudioOptions(auto_play=auto_play, **kwargs), rel_id="rId402",
                 media_rel_id="rId502", ext="mp3")


def test_nothing_to_play():
    assert build_timing([]) == ""
    assert build_timing([(2, video(auto_play=False))]) == ""


def test_tree_shape():
    xml = build_timing([(2, video())])
    assert xml.startswith("<p:timing><p:tnLst><p:par>")
    assert 'nodeType="tmRoot"' in xml
    assert 'nodeType="mainSeq"' in xml
    assert 'presetClass="mediacall"' in xml
    assert 'cmd="playFrom(0.0)"' in xml
    assert '<p:spTgt spid="2"/>' in xml
    assert "<p:video><p:cMediaNode" in xml


def test_ids_unique_and_increasing():
    xml = build_timing([(2, video()), (3, audio())])
    ids = [int(i) for i in re.findall(r'<p:cTn id="(\d+)"', xml)]
    assert ids == sorted(ids)
    assert len(ids) == len(set(ids))
    assert ids[:2] == [1, 2]


def test_only_auto_play_objects_targeted():
    xml = build_timing([(2, video(auto_play=False)), (3, audio())])
    assert '<p:spTgt spid="3"/>' in xml
    assert '<p:spTgt spid="2"/>' not in xml


def test_media_flags():
    xml = build_timing([(2, video(loop=True, muted=True)), (3, audio(hidden=True))])
    assert 'repeatCount="indefinite"' in xml
    assert 'mute="1"' in xml
    assert 'showWhenStopped="0"' in xml
    assert "<p:audio><p:cMediaNode" in xml


def test_flags_kept_without_auto_play():
    xml = build_timing([(2, video(auto_play=False, loop=True, muted=True)), (3, audio(auto_play=False))])
    assert 'repeatCount="indefinite"' in xml
    assert 'mute="1"' in xml
    assert '<p:spTgt spid="2"/>' in xml
    assert '<p:spTgt spid="3"/>' not in xml
    assert "mainSeq" not in xml
    assert "playFrom" not in xml
    ids = [int(i) for i in re.findall(r'<p:cTn id="(\d+)"', xml)]
    assert len(ids) == len(set(ids)) and ids == sorted(ids)


def test_flagged_media_node_alongside_auto_play():
    xml = build_timing([(2, video()), (3, audio(auto_play=False, loop=True))])
    assert xml.count("<p:cMediaNode") == 2
    assert xml.count('cmd="playFrom(0.0)"') == 1
