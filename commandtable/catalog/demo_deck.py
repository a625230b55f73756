"""Demo deck: Atraxa, Praetors' Voice with a list of Commander staples."""

DEMO_COMMANDER = "Atraxa, Praetors' Voice"

DEMO_DECK = """
1 Sol Ring
1 Arcane Signet
1 Command Tower
1 Lightning Greaves
1 Swiftfoot Boots
1 Thought Vessel
1 Cultivate
1 Kodama's Reach
1 Counterspell
1 Swords to Plowshares
1 Path to Exile
1 Beast Within
1 Chaos Warp
1 Generous Gift
1 Cyclonic Rift
1 Vandalblast
1 Farseek
1 Nature's Lore
1 Rampant Growth
1 Rhystic Study
1 Smothering Tithe
1 Dockside Extortionist
1 Esper Sentinel
1 Fierce Guardianship
1 Deflecting Swat
1 Force of Will
1 Mana Drain
1 Teferi's Protection
1 Heroic Intervention
1 Boros Charm
1 Dovin's Veto
1 Anguished Unmaking
1 Assassin's Trophy
1 Vindicate
1 Demonic Tutor
1 Vampiric Tutor
1 Enlightened Tutor
1 Mystical Tutor
1 Worldly Tutor
1 Craterhoof Behemoth
1 Avenger of Zendikar
1 Eternal Witness
1 Reclamation Sage
1 Mulldrifter
1 Solemn Simulacrum
1 Sun Titan
1 Grave Titan
1 Frost Titan
1 Inferno Titan
1 Primeval Titan
1 Birds of Paradise
1 Llanowar Elves
1 Elvish Mystic
1 Fyndhorn Elves
1 Blood Artist
1 Zulaport Cutthroat
1 Viscera Seer
1 Carrion Feeder
1 Sakura-Tribe Elder
1 Coiling Oracle
1 Baleful Strix
1 Ice-Fang Coatl
1 Phyrexian Arena
1 Sylvan Library
1 Mirari's Wake
1 Doubling Season
1 Parallel Lives
1 Greater Good
1 Skullclamp
1 Sensei's Divining Top
1 Chromatic Lantern
1 Coalition Relic
1 Thran Dynamo
1 Gilded Lotus
1 Mana Crypt
1 Mana Vault
1 Chrome Mox
1 Mox Diamond
1 Flooded Strand
1 Polluted Delta
1 Bloodstained Mire
1 Wooded Foothills
1 Windswept Heath
1 Marsh Flats
1 Scalding Tarn
1 Misty Rainforest
1 Arid Mesa
1 Verdant Catacombs
1 Breeding Pool
1 Hallowed Fountain
1 Watery Grave
1 Blood Crypt
1 Stomping Ground
1 Temple Garden
1 Godless Shrine
1 Steam Vents
1 Overgrown Tomb
1 Sacred Foundry
""".strip()
