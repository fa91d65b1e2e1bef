"""Built-in sample dataset (the Crestwood demo data)."""
from .models import Course, Dataset, Lecturer, Room, StudentRequest

ALL_PERIODS = ("A", "B", "C", "D", "E", "F")

def sample_lecturers():
    return [
        Lecturer("L1", "Dr. Sarah Johnson", 2, ("A", "B", "C", "D")),
        Lecturer("L2", "Prof. Michael Chen", 1, ("A", "C", "E")),
        Lecturer("L3", "Dr. Emily Rodriguez", 2, ("B", "D", "F")),
        Lecturer("L4", "Prof. James Wilson", 1, ("A", "B", "E", "F")),
        Lecturer("L5", "Dr. Lisa Thompson", 2, ("C", "D", "E")),
    ]

def sample_rooms():
    return [
        Room("R1", "Main Hall", 200, ALL_PERIODS),
        Room("R2", "Room 101", 30, ALL_PERIODS),
        Room("R3", "Room 102", 30, ALL_PERIODS),
        Room("R4", "Science Lab", 40, ("B", "D", "F")),
        Room("R5", "Computer Lab", 25, ("A", "C", "E")),
    ]

def sample_courses():
    return [
        Course("C1", "MATH101", "Introduction to Calculus", "L1", 120),
        Course("C2", "PHYS200", "Classical Mechanics", "L2", 80),
        Course("C3", "CS150", "Programming Fundamentals", "L3", 25),
        Course("C4", "ENG220", "Creative Writing", "L4", 30),
        Course("C5", "HIST110", "World History", "L1", 150),
        Course("C6", "BIO240", "Human Anatomy", "L5", 40),
        Course("C7", "CHEM180", "Organic Chemistry", "L2", 30),
        Course("C8", "PSYCH101", "Introduction to Psychology", "L3", 200),
    ]

def sample_requests():
    return [
        StudentRequest("SR1", "S1", "Alex Smith", "A", ("C1", "C2", "C5")),
        StudentRequest("SR2", "S2", "Jamie Taylor", "A", ("C2", "C5", "C7")),
        StudentRequest("SR3", "S3", "Morgan Wright", "B", ("C1", "C3", "C8")),
        StudentRequest("SR4", "S4", "Casey Jones", "B", ("C3", "C8", "C4")),
        StudentRequest("SR5", "S5", "Jordan Lee", "C", ("C2", "C6", "C7")),
        StudentRequest("SR6", "S6", "Riley Garcia", "C", ("C6", "C7", "C2")),
        StudentRequest("SR7", "S7", "Quinn Peterson", "D", ("C1", "C6", "C8")),
        StudentRequest("SR8", "S8", "Avery Martinez", "D", ("C8", "C1", "C3")),
    ]

def sample_dataset() -> Dataset:
    return Dataset(sample_lecturers(), sample_rooms(), sample_courses(), sample_requests())
