"""Named process sets and watch-list construction."""

from top2csv.errors import EmptyWatchListError, UnknownPresetError

PRESETS: dict[str, tuple[str, ...]] = {
    "all": (
        "ascmanager", "BmfCol", "BmfExcReceiver", "BmfExcSender", "CctCtl",
        "ctlkcmdpro", "daccompms", "daccomrss", "daccontrol", "dbpoller",
        "dbserver", "dpckeqpmgr", "dpckvarmgr", "EcsSmc", "EcsSys", "ftsserver",
        "HdvServer", "historyserver", "inputmgr", "LoginServer", "opmserver",
        "PasCtl", "PisCtl", "RadCom", "RadCtl", "RadPgr", "ReaPrgServer",
        "scsalarmserver", "scsctlgrcserver", "SigCtlServer", "SigDpc", "SigLdt",
        "SigLoc", "taonameserv", "TelSvr", "tmcpex", "tmcsup",
    ),
    "ats": (
        "ascmanager", "BmfCol", "ctlkcmdpro", "daccompms", "daccomrss",
        "daccontrol", "dbpoller", "dbserver", "dpckeqpmgr", "dpckvarmgr",
        "ftsserver", "HdvServer", "inputmgr", "ReaPrgServer", "scsalarmserver",
        "SigCtlServer", "SigDpc", "SigLdt", "SigLoc", "taonameserv", "tmcpex",
        "tmcsup",
    ),
    "cms": (
        "ascmanager", "BmfCol", "BmfExcReceiver", "BmfExcSender", "CctCtl",
        "ctlkcmdpro", "daccompms", "daccontrol", "dbpoller", "dbserver",
        "dpckeqpmgr", "dpckvarmgr", "ftsserver", "HdvServer", "historyserver",
        "inputmgr", "LoginServer", "opmserver", "PasCtl", "PisCtl", "RadCom",
        "RadCtl", "ReaPrgServer", "scsalarmserver", "scsctlgrcserver",
        "taonameserv", "TelSvr",
    ),
    "sms": (
        "ascmanager", "BmfCol", "CctCtl", "ctlkcmdpro", "daccompms",
        "daccomrss", "daccontrol", "dbpoller", "dbserver", "dpckeqpmgr",
        "dpckvarmgr", "EcsSmc", "EcsSys", "ftsserver", "HdvServer",
        "historyserver", "inputmgr", "LoginServer", "PasCtl", "PisCtl",
        "RadCom", "RadCtl", "RadPgr", "ReaPrgServer", "scsalarmserver",
        "scsctlgrcserver", "SigCtlServer", "SigDpc", "SigLdt", "SigLoc",
        "taonameserv", "TelSvr",
    ),
    "dcs": (
        "ascmanager", "BmfCol", "CctCtl", "ctlkcmdpro", "daccompms",
        "daccomrss", "daccontrol", "dbpoller", "dbserver", "dpckeqpmgr",
        "dpckvarmgr", "EcsSmc", "EcsSys", "ftsserver", "HdvServer",
        "historyserver", "inputmgr", "LoginServer", "PasCtl", "PisCtl",
        "RadCom", "RadCtl", "RadPgr", "ReaPrgServer", "scsalarmserver",
        "scsctlgrcserver", "SigCtlServer", "SigDpc", "SigLdt", "SigLoc",
        "taonameserv", "TelSvr", "tmcsup",
    ),
    "ecs": (
        "ascmanager", "BmfCol", "daccompms", "daccomrss", "daccontrol",
        "dbpoller", "dbserver", "dpckeqpmgr", "dpckvarmgr", "EcsSmc", "EcsSys",
        "HdvServer", "inputmgr", "ReaPrgServer", "scsalarmserver",
        "scsctlgrcserver", "taonameserv",
    ),
}


def preset_names() -> list[str]:
    return sorted(PRESETS)


def build_watch_list(preset: str | None = None, processes: list[str] | None = None) -> list[str]:
    """
    Build the ordered, duplicate-free list of processes to watch.

    The preset's processes come first, followed by each explicit process not
    already present. The first occurrence of a name decides its position.

    Raises:
        UnknownPresetError: ``preset`` is not a known preset name.
        EmptyWatchListError: Neither source contributed a process.
    """
    names: list[str] = []
    if preset is not None:
        if preset not in PRESETS:
            raise UnknownPresetError(preset)
        names.extend(PRESETS[preset])

    watch_list: list[str] = []
    seen: set[str] = set()
    for name in [*names, *(processes or [])]:
        if name not in seen:
            seen.add(name)
            watch_list.append(name)

    if not watch_list:
        raise EmptyWatchListError()
    return watch_list
