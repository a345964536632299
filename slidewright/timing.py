"""Slide timing tree: auto-play media on slide entry and per-media playback flags."""

import itertools

from .objects import Video


def _media_call(ids, shape_id: int) -> str:
    """Three nested pars around a playFrom(0.0) command on one shape."""
    outer, middle, effect, behavior = next(ids), next(ids), next(ids), next(ids)
    return (
        f'<p:par><p:cTn id="{outer}" fill="hold">'
        '<p:stCondLst><p:cond delay="0"/></p:stCondLst><p:childTnLst>'
        f'<p:par><p:cTn id="{middle}" fill="hold">'
        '<p:stCondLst><p:cond delay="0"/></p:stCondLst><p:childTnLst>'
        f'<p:par><p:cTn id="{effect}" presetID="1" presetClass="mediacall" presetSubtype="0" '
        'fill="hold" nodeType="afterEffect">'
        '<p:stCondLst><p:cond delay="0"/></p:stCondLst><p:childTnLst>'
        '<p:cmd type="call" cmd="playFrom(0.0)"><p:cBhvr>'
        f'<p:cTn id="{behavior}" dur="1" fill="hold"/>'
        f'<p:tgtEl><p:spTgt spid="{shape_id}"/></p:tgtEl>'
        "</p:cBhvr></p:cmd>"
        "</p:childTnLst></p:cTn></p:par>"
        "</p:childTnLst></p:cTn></p:par>"
        "</p:childTnLst></p:cTn></p:par>"
    )


def _media_node(ids, shape_id: int, is_video: bool, loop: bool,
                muted: bool, hidden: bool) -> str:
    """<p:video>/<p:audio> node carrying loop, mute and visibility."""
    tag = "p:video" if is_video else "p:audio"
    node_attrs = ' vol="80000"'
    if muted:
        node_attrs += ' mute="1"'
    if hidden:
        node_attrs += ' showWhenStopped="0"'
    repeat = ' repeatCount="indefinite"' if loop else ""
    return (
        f"<{tag}><p:cMediaNode{node_attrs}>"
        f'<p:cTn id="{next(ids)}"{repeat} fill="hold" display="0">'
        '<p:stCondLst><p:cond delay="0"/></p:stCondLst></p:cTn>'
        f'<p:tgtEl><p:spTgt spid="{shape_id}"/></p:tgtEl>'
        f"</p:cMediaNode></{tag}>"
    )


def _has_flags(obj) -> bool:
    o = obj.options
    return o.loop or getattr(o, "muted", False) or getattr(o, "hidden", False)


def build_timing(media: list) -> str:
    """Timing XML for [(shape_id, Video|Audio), ...].

    Auto-play objects get a playFrom call in the main sequence. Loop, mute and
    hidden live on the media node, which every auto-playing or flagged object
    gets. "" when no object needs either.
    """
    auto = [(sid, obj) for sid, obj in media if obj.auto_play]
    flagged = [(sid, obj) for sid, obj in media if obj.auto_play or _has_flags(obj)]
    if not flagged:
        return ""

    ids = itertools.count(3 if auto else 2)
    seq = ""
    if auto:
        calls = "".join(_media_call(ids, sid) for sid, _ in auto)
        seq = (
            '<p:seq concurrent="1" nextAc="seek">'
            f'<p:cTn id="2" dur="indefinite" nodeType="mainSeq"><p:childTnLst>{calls}</p:childTnLst></p:cTn>'
            '<p:prevCondLst><p:cond evt="onPrev" delay="0"><p:tgtEl><p:sldTgt/></p:tgtEl></p:cond></p:prevCondLst>'
            '<p:nextCondLst><p:cond evt="onNext" delay="0"><p:tgtEl><p:sldTgt/></p:tgtEl></p:cond></p:nextCondLst>'
            "</p:seq>"
        )
    nodes = []
    for sid, obj in flagged:
        o = obj.options
        nodes.append(_media_node(
            ids, sid, isinstance(obj, Video), o.loop,
            muted=getattr(o, "muted", False),
            hidden=getattr(o, "hidden", False),
        ))

    return (
        "<p:timing><p:tnLst><p:par>"
        '<p:cTn id="1" dur="indefinite" restart="never" nodeType="tmRoot"><p:childTnLst>'
        f'{seq}{"".join(nodes)}'
        "</p:childTnLst></p:cTn>"
        "</p:par></p:tnLst></p:timing>"
    )
