"""Atom sources: ovens, Gaussian sources, central creators, mass distributions and emission control."""