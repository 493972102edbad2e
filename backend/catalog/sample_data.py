"""
Reference catalog: refrigerator and dishwasher parts plus known symptoms.

Plain dicts, validated into catalog models by load_catalog(). Order matters:
catalog insertion order is the final tie-breaker for search ranking.
"""

PRODUCTS = [
    {
        "part_number": "PS11752778",
        "name": "Refrigerator Water Filter",
        "description": (
            "Genuine replacement water filter for a range of refrigerator models. "
            "Reduces chlorine, sediment and other impurities for clean water and ice."
        ),
        "category": "refrigerator",
        "brand": "Whirlpool",
        "compatible_models": ["WRF989SDAM", "WRF757SDEM", "WRF540CWHZ", "WRF535SWHZ"],
        "price": 45.99,
        "availability": "in-stock",
        "image_url": "https://images.partselect.com/PS11752778_01_a.jpg",
        "installation_difficulty": "easy",
        "estimated_install_time": 10,
        "required_tools": ["None - tool-free installation"],
        "safety_warnings": [
            "Turn off the water supply before installation",
            "Flush the new filter for 3-5 minutes before use",
            "Replace every 6 months for best performance",
        ],
        "installation_steps": [
            {
                "step": 1,
                "title": "Locate the water filter",
                "description": (
                    "Open the refrigerator door and find the filter compartment, usually in the "
                    "upper right corner of the fresh food section."
                ),
            },
            {
                "step": 2,
                "title": "Remove the old filter",
                "description": "Turn the old filter counterclockwise until it releases, then pull it straight out.",
                "warning": "Some water may spill during removal, keep a towel ready.",
            },
            {
                "step": 3,
                "title": "Prepare the new filter",
                "description": "Unpack the new filter and remove any protective caps or seals.",
            },
            {
                "step": 4,
                "title": "Install the new filter",
                "description": "Insert the new filter and turn it clockwise until it clicks into place.",
            },
            {
                "step": 5,
                "title": "Reset the filter indicator",
                "description": "Hold the filter reset button for 3 seconds until the indicator stops blinking.",
            },
            {
                "step": 6,
                "title": "Flush the system",
                "description": "Run water through the dispenser for 3-5 minutes to purge air and activate the filter.",
                "warning": "The first water may look cloudy. This clears after flushing.",
            },
        ],
    },
    {
        "part_number": "WPW10348269",
        "name": "Dishwasher Wash Pump Motor",
        "description": (
            "Replacement wash pump motor assembly for Whirlpool and KitchenAid dishwashers. "
            "Circulates water through the spray arms during wash cycles."
        ),
        "category": "dishwasher",
        "brand": "Whirlpool",
        "compatible_models": ["WDT780SAEM1", "WDT780PAEM1", "WDT750SAHZ0", "KDTM404ESS0"],
        "price": 189.99,
        "availability": "in-stock",
        "installation_difficulty": "hard",
        "estimated_install_time": 90,
        "required_tools": [
            "Phillips head screwdriver",
            "Flathead screwdriver",
            "Socket wrench set",
            "Pliers",
            "Towels",
        ],
        "safety_warnings": [
            "Disconnect power and water supply before beginning",
            "Drain all water from the dishwasher",
            "Wear safety glasses when working with springs",
            "This repair requires pulling the dishwasher out of the cabinet",
        ],
        "installation_steps": [
            {
                "step": 1,
                "title": "Disconnect utilities",
                "description": "Switch off power at the circuit breaker and close the water valve under the sink.",
            },
            {
                "step": 2,
                "title": "Remove the dishwasher",
                "description": "Remove the screws holding the dishwasher to the countertop and slide it out of the opening.",
            },
            {
                "step": 3,
                "title": "Access the pump motor",
                "description": "Lay the dishwasher on its back and remove the bottom access panel.",
            },
            {
                "step": 4,
                "title": "Disconnect electrical connections",
                "description": "Unplug the wire harnesses from the pump motor, noting where each one goes.",
                "warning": "Confirm power is off at the breaker before touching any wiring.",
            },
            {
                "step": 5,
                "title": "Remove the old pump motor",
                "description": "Remove the mounting bolts and lift out the old pump motor assembly.",
            },
            {
                "step": 6,
                "title": "Install the new pump motor",
                "description": "Seat the new motor, secure the mounting bolts and reconnect every harness.",
            },
            {
                "step": 7,
                "title": "Reassemble and test",
                "description": (
                    "Refit the access panel, slide the dishwasher back, restore power and water "
                    "and run a test cycle."
                ),
            },
        ],
    },
    {
        "part_number": "W10873791",
        "name": "Ice Maker Assembly",
        "description": (
            "Complete ice maker assembly for Whirlpool refrigerators, including the ice maker "
            "module, wire harness and mounting hardware."
        ),
        "category": "refrigerator",
        "brand": "Whirlpool",
        "compatible_models": ["WRF989SDAM", "WRF767SDHZ", "WRF555SDFZ", "WRS325SDHZ"],
        "price": 234.99,
        "availability": "in-stock",
        "installation_difficulty": "medium",
        "estimated_install_time": 45,
        "required_tools": ["Phillips head screwdriver", "Flathead screwdriver", "1/4 inch nut driver"],
        "safety_warnings": [
            "Unplug the refrigerator before starting the repair",
            "Turn off the water supply to the ice maker",
            "Let the ice maker reach room temperature before handling",
        ],
    },
    {
        "part_number": "W10190965",
        "name": "Ice Maker Water Inlet Valve",
        "description": (
            "Water inlet valve that controls water flow to the ice maker. A common replacement "
            "when the ice maker stops producing ice."
        ),
        "category": "refrigerator",
        "brand": "Whirlpool",
        "compatible_models": ["WRF989SDAM", "WRF767SDHZ", "WRF555SDFZ", "WRS325SDHZ"],
        "price": 67.99,
        "availability": "in-stock",
        "installation_difficulty": "medium",
        "estimated_install_time": 30,
        "required_tools": ["Adjustable wrench", "Phillips head screwdriver", "Towels"],
        "safety_warnings": [
            "Turn off the water supply before removal",
            "Unplug the refrigerator",
            "Keep towels ready for spilled water",
        ],
    },
    {
        "part_number": "W10312695",
        "name": "Refrigerator Door Seal",
        "description": (
            "Door gasket for the fresh food compartment. Keeps cold air in and holds "
            "temperature and humidity steady."
        ),
        "category": "refrigerator",
        "brand": "Whirlpool",
        "compatible_models": ["WRF989SDAM", "WRF767SDHZ", "WRF540CWHZ"],
        "price": 89.99,
        "availability": "in-stock",
        "installation_difficulty": "medium",
        "estimated_install_time": 60,
        "required_tools": ["Phillips head screwdriver", "Hair dryer"],
        "safety_warnings": [
            "Clean the door surface before installation",
            "Warm the gasket with a hair dryer so it seats easily",
        ],
    },
    {
        "part_number": "W10190929",
        "name": "Evaporator Fan Motor",
        "description": (
            "Refrigerator evaporator fan motor that circulates cold air through the fresh food "
            "and freezer compartments."
        ),
        "category": "refrigerator",
        "brand": "Whirlpool",
        "compatible_models": ["WRF989SDAM", "WRF767SDHZ", "WRF555SDFZ"],
        "price": 156.99,
        "availability": "in-stock",
        "installation_difficulty": "hard",
        "estimated_install_time": 75,
        "required_tools": ["Phillips head screwdriver", "Socket wrench set", "Wire nuts"],
        "safety_warnings": [
            "Unplug the refrigerator",
            "Empty the freezer",
            "Let the defrost cycle finish",
        ],
    },
    {
        "part_number": "WPW10082861",
        "name": "Dishwasher Drain Pump",
        "description": "Drain pump assembly that removes wastewater from the dishwasher during drain cycles.",
        "category": "dishwasher",
        "brand": "Whirlpool",
        "compatible_models": ["WDT780SAEM1", "WDT780PAEM1", "WDT750SAHZ0"],
        "price": 142.99,
        "availability": "in-stock",
        "installation_difficulty": "hard",
        "estimated_install_time": 60,
        "required_tools": ["Phillips head screwdriver", "Pliers", "Socket wrench"],
        "safety_warnings": [
            "Disconnect power and water",
            "Pull the dishwasher out of the cabinet for access",
            "Drain all water before starting",
        ],
    },
    {
        "part_number": "W10300924",
        "name": "Dishwasher Door Latch",
        "description": (
            "Door latch assembly that holds the dishwasher door shut and trips the door "
            "switch so the cycle can run."
        ),
        "category": "dishwasher",
        "brand": "Whirlpool",
        "compatible_models": ["WDT780SAEM1", "WDT780PAEM1", "WDT750SAHZ0", "KDTM404ESS0"],
        "price": 78.99,
        "availability": "in-stock",
        "installation_difficulty": "medium",
        "estimated_install_time": 30,
        "required_tools": ["Phillips head screwdriver", "Torx screwdriver set"],
        "safety_warnings": [
            "Disconnect power before starting",
            "Test the door operation after installation",
        ],
    },
    {
        "part_number": "WR49X10283",
        "name": "GE Refrigerator Water Filter",
        "description": (
            "Genuine GE refrigerator water filter that reduces chlorine taste and odor, "
            "sediment and other contaminants."
        ),
        "category": "refrigerator",
        "brand": "GE",
        "compatible_models": ["GFE28HMKES", "GFE26JSMSS", "PFE28PBLTS"],
        "price": 52.99,
        "availability": "in-stock",
        "installation_difficulty": "easy",
        "estimated_install_time": 5,
        "required_tools": ["None"],
        "safety_warnings": ["Replace every 6 months", "Flush the new filter before use"],
    },
    {
        "part_number": "5304505524",
        "name": "Frigidaire Dishwasher Heating Element",
        "description": "Heating element for Frigidaire dishwashers. Heats water during the wash and dry cycles.",
        "category": "dishwasher",
        "brand": "Frigidaire",
        "compatible_models": ["FGID2466QF0A", "FGIP2468UF0A", "FFID2426TS0A"],
        "price": 67.99,
        "availability": "backordered",
        "installation_difficulty": "medium",
        "estimated_install_time": 45,
        "required_tools": ["Phillips head screwdriver", "Multimeter", "Wire nuts"],
        "safety_warnings": [
            "Disconnect power before installation",
            "Test the element with a multimeter before installing",
            "Make sure every electrical connection is tight",
        ],
    },
]


SYMPTOMS = [
    {
        "id": "ice-maker-not-working",
        "description": "Ice maker not producing ice",
        "category": "refrigerator",
        "common_causes": [
            "Water supply issue",
            "Faulty ice maker assembly",
            "Clogged water inlet valve",
            "Freezer temperature too warm",
            "Loose wiring to the ice maker",
        ],
        "diagnostic_steps": [
            {
                "step": 1,
                "description": "Check that the ice maker is switched on and the wire arm is down",
                "expected_result": "Ice maker is in the ON position",
                "next_step_if_true": 2,
                "recommended_action": "Switch the ice maker on and lower the wire arm",
            },
            {
                "step": 2,
                "description": "Check the water supply by using the water dispenser",
                "expected_result": "Water flows from the dispenser",
                "next_step_if_true": 3,
                "next_step_if_false": 4,
            },
            {
                "step": 3,
                "description": "Listen for the ice maker cycling (motor running, water filling)",
                "expected_result": "Cycling sounds every few hours",
                "next_step_if_false": 5,
                "recommended_action": "If it never cycles, the ice maker assembly likely needs replacement",
            },
            {
                "step": 4,
                "description": "Inspect the water filter and the water line connections",
                "expected_result": "Filter seated correctly and lines connected",
                "next_step_if_true": 2,
                "recommended_action": "Replace the filter or reconnect the water line",
            },
            {
                "step": 5,
                "description": "Check the freezer temperature (0-5 F)",
                "expected_result": "Temperature is within range",
                "recommended_action": "Adjust the temperature or look for cooling problems",
            },
        ],
        "recommended_parts": ["W10873791", "W10190965", "PS11752778"],
    },
    {
        "id": "dishwasher-not-draining",
        "description": "Dishwasher not draining properly",
        "category": "dishwasher",
        "common_causes": [
            "Clogged drain pump",
            "Blocked garbage disposal",
            "Kinked drain hose",
            "Faulty drain pump motor",
        ],
        "diagnostic_steps": [
            {
                "step": 1,
                "description": "Make sure the garbage disposal is clear (if connected)",
                "expected_result": "Disposal runs freely",
                "next_step_if_true": 2,
                "recommended_action": "Clear the disposal and run it",
            },
            {
                "step": 2,
                "description": "Inspect the filter at the bottom of the tub",
                "expected_result": "Filter is clean and seated",
                "next_step_if_true": 3,
                "recommended_action": "Clean or replace the dishwasher filter",
            },
            {
                "step": 3,
                "description": "Listen for the drain pump during the drain cycle",
                "expected_result": "Pump motor can be heard running",
                "next_step_if_true": 4,
                "next_step_if_false": 5,
            },
            {
                "step": 4,
                "description": "Check the drain hose under the sink for kinks or clogs",
                "expected_result": "Hose is straight and clear",
                "recommended_action": "Straighten the hose or clear the blockage",
            },
            {
                "step": 5,
                "description": "Suspect the drain pump itself",
                "expected_result": "Pump runs when activated",
                "recommended_action": "Replace the drain pump assembly",
            },
        ],
        "recommended_parts": ["WPW10082861"],
    },
    {
        "id": "refrigerator-too-warm",
        "description": "Refrigerator not cooling properly",
        "category": "refrigerator",
        "common_causes": [
            "Dirty condenser coils",
            "Faulty evaporator fan",
            "Worn door seals",
            "Temperature control issues",
            "Blocked air vents",
        ],
        "diagnostic_steps": [
            {
                "step": 1,
                "description": "Check the temperature setting (35-38 F for fresh food)",
                "expected_result": "Temperature is set correctly",
                "next_step_if_true": 2,
                "recommended_action": "Adjust the temperature setting",
            },
            {
                "step": 2,
                "description": "Check the door seals for gaps or tears",
                "expected_result": "Doors seal tightly",
                "next_step_if_true": 3,
                "recommended_action": "Replace the door gasket",
            },
            {
                "step": 3,
                "description": "Listen for the evaporator fan in the freezer",
                "expected_result": "Fan runs whenever the compressor runs",
                "next_step_if_true": 4,
                "next_step_if_false": 5,
            },
            {
                "step": 4,
                "description": "Clean the condenser coils (back or bottom of the unit)",
                "expected_result": "Coils are free of dust",
                "recommended_action": "Clean the coils with a coil brush and vacuum",
            },
            {
                "step": 5,
                "description": "Suspect the evaporator fan motor",
                "expected_result": "Fan runs smoothly and quietly",
                "recommended_action": "Replace the evaporator fan motor",
            },
        ],
        "recommended_parts": ["W10312695", "W10190929"],
    },
    {
        "id": "dishwasher-leaking",
        "description": "Dishwasher leaking water onto the floor",
        "category": "dishwasher",
        "common_causes": [
            "Worn door gasket",
            "Door latch not closing fully",
            "Loose drain hose clamp",
            "Cracked tub or pump seal",
        ],
        "diagnostic_steps": [
            {
                "step": 1,
                "description": "Check whether the dishwasher sits level",
                "expected_result": "Unit is level front to back",
                "next_step_if_true": 2,
                "recommended_action": "Adjust the leveling legs",
            },
            {
                "step": 2,
                "description": "Inspect the door gasket for tears or debris",
                "expected_result": "Gasket is intact and clean",
                "next_step_if_true": 3,
                "recommended_action": "Clean or replace the door gasket",
            },
            {
                "step": 3,
                "description": "Close the door and confirm the latch engages firmly",
                "expected_result": "Door latches with a click",
                "next_step_if_true": 4,
                "recommended_action": "Replace the door latch",
            },
            {
                "step": 4,
                "description": "Check the drain hose and its clamps under the sink",
                "expected_result": "No drips at the hose connections",
                "next_step_if_true": 5,
                "recommended_action": "Tighten or replace the hose clamp",
            },
            {
                "step": 5,
                "description": "Look under the tub for water around the pump",
                "expected_result": "Area under the pump is dry",
                "recommended_action": "Replace the pump seal or the wash pump assembly",
            },
        ],
        "recommended_parts": ["W10300924", "WPW10348269"],
    },
    {
        "id": "dishwasher-not-heating",
        "description": "Dishwasher not heating water or drying dishes, electrical heating fault",
        "category": "dishwasher",
        "common_causes": [
            "Burned out heating element",
            "Failed high-limit thermostat",
            "Faulty control board relay",
            "Heated dry option switched off",
        ],
        "diagnostic_steps": [
            {
                "step": 1,
                "description": "Confirm the heated dry option is selected",
                "expected_result": "Heated dry is enabled",
                "next_step_if_true": 2,
                "recommended_action": "Enable heated dry and run another cycle",
            },
            {
                "step": 2,
                "description": "Run the kitchen tap until hot before starting a cycle",
                "expected_result": "Incoming water is at least 120 F",
                "next_step_if_true": 3,
                "recommended_action": "Raise the water heater temperature",
            },
            {
                "step": 3,
                "description": "Disconnect power and visually inspect the heating element for breaks",
                "expected_result": "No visible breaks or blistering",
                "next_step_if_true": 4,
                "next_step_if_false": 6,
            },
            {
                "step": 4,
                "description": "Measure heating element resistance with a multimeter",
                "expected_result": "Roughly 15-30 ohms",
                "next_step_if_true": 5,
                "next_step_if_false": 6,
            },
            {
                "step": 5,
                "description": "Test the high-limit thermostat for continuity",
                "expected_result": "Thermostat shows continuity at room temperature",
                "recommended_action": "Replace the thermostat if it is open",
            },
            {
                "step": 6,
                "description": "Replace the heating element",
                "expected_result": "Water heats and dishes dry after a full cycle",
                "recommended_action": "Install a new heating element",
            },
        ],
        "recommended_parts": ["5304505524"],
    },
]
