"""
main.py — Bootstrap

1. Load tuning values
2. Create the app
3. Build the simulation and restore the save slot if one exists
4. Push the starting scene
5. Run
"""

from __future__ import annotations
import sys

from core import tuning
from core.app import App
from core.rng import RandomSource
from core.save import SaveAdapter
from simulation.world_sim import Simulation
from scenes.organism_scene import OrganismScene


def main(argv: list[str] | None = None):
    argv = sys.argv[1:] if argv is None else argv
    seed = int(argv[0]) if argv and argv[0].lstrip("-").isdigit() else None

    tuning.load()
    app = App(title="Primordial", width=960, height=640)

    # -- Simulation --
    sim = Simulation(rng=RandomSource(seed), saves=SaveAdapter(slot=0))
    if not sim.load_from_save():
        print("[MAIN] No usable save, starting a new life")

    # -- Start --
    app.push_scene(OrganismScene(sim))
    app.run()


if __name__ == "__main__":
    main()
