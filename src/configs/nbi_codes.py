"""
Code -> label tables for the recoded NBI fields.

Each entry names the raw column ("source"), the zero-pad width codes are
normalized to before lookup ("width"; None = compare as-is), the closed set of
codes ("codes") and the label for any code outside that set ("default").
"""

# Items 21 (maintenance responsibility) and 22 (owner) share one code list
_AGENCY_CODES = {
    "01": "state highway agency",
    "02": "county highway agency",
    "03": "town or township highway agency",
    "04": "city or municipal highway agency",
    "11": "state park, forest, or reservation agency",
    "12": "local park, forest, or reservation agency",
    "21": "other state agencies",
    "25": "other local agencies",
    "26": "private (other than railroad)",
    "27": "railroad",
    "31": "state toll authority",
    "32": "local toll authority",
    "60": "other federal agencies",
    "61": "indian tribal government",
    "62": "bureau of indian affairs",
    "63": "bureau of fish and wildlife",
    "64": "u.s. forest service",
    "66": "national park service",
    "67": "tennessee valley authority",
    "68": "bureau of land management",
    "69": "bureau of reclamation",
    "70": "corps of engineers (civil)",
    "71": "corps of engineers (military)",
    "72": "air force",
    "73": "navy/marines",
    "74": "army",
    "75": "nasa",
    "76": "metropolitan washington airports service",
    "80": "unknown",
}

NO_WORK_PROPOSED = "no work proposed"

CODE_TABLES = {
    "route_type": {
        "source": "ROUTE_PREFIX_005B",
        "width": 1,
        "codes": {
            "1": "interstate highway",
            "2": "u.s. numbered highway",
            "3": "state highway",
            "4": "county highway",
            "5": "city street",
            "6": "federal lands road",
            "7": "state lands road",
            "8": "other",
        },
        "default": None,
    },
    "service_level": {
        "source": "SERVICE_LEVEL_005C",
        "width": 1,
        "codes": {
            "0": "none of the below",
            "1": "mainline",
            "2": "alternate",
            "3": "bypass",
            "4": "spur",
            "6": "business",
            "7": "ramp, wye, connector, etc.",
            "8": "service and/or unclassified frontage road",
        },
        "default": None,
    },
    "maintenance_responsibility": {
        "source": "MAINTENANCE_021",
        "width": 2,
        "codes": _AGENCY_CODES,
        "default": None,
    },
    "owner": {
        "source": "OWNER_022",
        "width": 2,
        "codes": _AGENCY_CODES,
        "default": None,
    },
    "historical_significance": {
        "source": "HISTORY_037",
        "width": 1,
        "codes": {
            "1": "on the national register of historic places",
            "2": "eligible for the national register of historic places",
            "3": "possibly eligible for the national register of historic places",
            "4": "historical significance is not determinable at this time",
            "5": "not eligible for the national register of historic places",
        },
        "default": None,
    },
    "operational_status": {
        "source": "OPEN_CLOSED_POSTED_041",
        "width": None,  # letter codes
        "codes": {
            "A": "open, no restriction",
            "B": "open, posting recommended but not legally implemented",
            "D": "open, would be posted or closed except for temporary shoring",
            "E": "open, temporary structure in place",
            "G": "new structure not yet open to traffic",
            "K": "bridge closed to all traffic",
            "P": "posted for load",
            "R": "posted for other load-capacity restriction",
        },
        "default": None,
    },
    "scour_critical": {
        "source": "SCOUR_CRITICAL_113",
        "width": None,  # mixed digit/letter codes
        "codes": {
            "N": "bridge not over waterway",
            "U": "bridge with unknown foundation",
            "T": "bridge over tidal waters not evaluated for scour",
            "9": "bridge foundations on dry land",
            "8": "bridge foundations stable, well above scour",
            "7": "countermeasures installed to correct a previous problem",
            "6": "scour calculation/evaluation has not been made",
            "5": "bridge foundations determined to be stable",
            "4": "bridge foundations stable, action required to protect exposed foundations",
            "3": "scour critical, foundations unstable for assessed or calculated scour",
            "2": "scour critical, extensive scour has occurred",
            "1": "scour critical, failure of piers/abutments is imminent",
            "0": "scour critical, bridge has failed and is closed to traffic",
        },
        "default": None,
    },
    "work_proposed": {
        "source": "WORK_PROPOSED_075A",
        "width": 2,
        "codes": {
            "31": "replacement due to substandard load capacity or geometry",
            "32": "replacement due to relocation of road",
            "33": "widening of existing bridge",
            "34": "widening and rehabilitation of existing bridge",
            "35": "rehabilitation due to general structure deterioration",
            "36": "bridge deck rehabilitation",
            "37": "bridge deck replacement",
            "38": "other structural work",
        },
        # Unmatched codes (including blanks) mean no work is scheduled
        "default": NO_WORK_PROPOSED,
    },
    "work_done_by": {
        "source": "WORK_DONE_BY_075B",
        "width": 1,
        "codes": {
            "1": "work to be done by contract",
            "2": "work to be done by owner's forces",
        },
        "default": NO_WORK_PROPOSED,
    },
}
